"""Plain-language insights for each dashboard panel.

The sentences are derived from the :mod:`txn_analytics.insights` payloads
only. Metrics that are undefined for the current data are skipped rather than
rendered as ``NaN``.
"""

from __future__ import annotations

from . import utils
from .insights import DashboardPayload


def _direction(value: float, positive: str, negative: str) -> str:
    return positive if value > 0 else negative


def _monthly_insights(payload: DashboardPayload) -> list[str]:
    monthly = payload["monthly"]
    lines: list[str] = []
    if monthly["avg_growth_rate"] is not None:
        lines.append(
            f"Average month-over-month growth is {utils.format_percent(monthly['avg_growth_rate'])}"
            f" with {utils.format_percent(monthly['growth_volatility'])} volatility."
        )
    if monthly["latest_growth"] is not None:
        lines.append(
            f"Volume is {_direction(monthly['latest_growth'], 'up', 'down')} "
            f"{utils.format_percent(abs(monthly['latest_growth']))} on the previous month."
        )
    if monthly["highest_volume"] is not None:
        lines.append(
            f"The strongest month processed {utils.format_currency(monthly['highest_volume'], decimals=0)}."
        )
    return lines


def _velocity_insights(payload: DashboardPayload) -> list[str]:
    hourly = payload["hourly"]
    if hourly["peak_hour"] is None:
        return []
    lines = [f"Most transactions arrive at {hourly['peak_hour']}; the largest volume at {hourly['peak_volume_hour']}."]
    if hourly["avg_per_hour"] is not None and hourly["std_dev_per_hour"] is not None:
        lines.append(
            f"Active hours average {utils.format_number(hourly['avg_per_hour'], decimals=1)} transactions"
            f" (σ {utils.format_number(hourly['std_dev_per_hour'], decimals=1)})."
        )
    return lines


def _processing_insights(payload: DashboardPayload) -> list[str]:
    processing = payload["processing"]
    summary = processing["stats"]
    lines: list[str] = []
    if processing["fast_share"] is not None:
        lines.append(
            f"{utils.format_percent(processing['fast_share'])} of transactions are available within 15 minutes."
        )
    if processing["variability"] is not None:
        lines.append(f"Processing times show {processing['variability']} variability.")
    if processing["skew"] is not None:
        relation = "lower" if processing["skew"] == "positive" else "higher"
        lines.append(
            f"Median processing time ({utils.format_minutes(summary['median'], decimals=0)}) is {relation}"
            f" than the mean, indicating {processing['skew']} skew."
        )
    trend = payload["processing_trend"]
    if trend["trend"] is not None:
        lines.append(
            f"Daily processing time shows a {utils.format_percent(abs(trend['trend']))}"
            f" {_direction(trend['trend'], 'increase', 'decrease')} over the period."
        )
    return lines


def _segment_insights(payload: DashboardPayload) -> list[str]:
    segments = [entry for entry in payload["value_segments"]["segments"] if entry["count"]]
    if not segments:
        return []
    busiest = max(segments, key=lambda entry: entry["count"])
    heaviest = max(segments, key=lambda entry: entry["volume"])
    return [
        f"{busiest['label']} transactions are the most common ({utils.format_percent(busiest['count_share'])}).",
        f"{heaviest['label']} transactions carry the most volume ({utils.format_percent(heaviest['volume_share'])}).",
    ]


def _currency_insights(payload: DashboardPayload) -> list[str]:
    currency = payload["currency"]
    if currency["primary_currency"] is None:
        return []
    return [
        f"{currency['primary_currency']} accounts for {utils.format_percent(currency['primary_share'])}"
        f" of customer-facing volume across {currency['currency_count']} currencies."
    ]


def _weekday_insights(payload: DashboardPayload) -> list[str]:
    weekday = payload["weekday"]
    if weekday["peak_day"] is None:
        return []
    return [
        f"{weekday['peak_day']} is the busiest day with {utils.format_number(weekday['peak_day_count'])} transactions.",
        f"An average weekday sees {utils.format_number(weekday['avg_daily_count'])} transactions.",
    ]


def _rate_insights(payload: DashboardPayload) -> list[str]:
    rates = payload["exchange_rates"]
    summary = rates["stats"]
    lines: list[str] = []
    if summary["volatility"] is not None:
        lines.append(f"The exchange rate shows {utils.format_percent(summary['volatility'])} volatility over the period.")
    weighted = rates["volume_weighted_rate"]
    if weighted is not None and summary["mean"] is not None and weighted != summary["mean"]:
        relation = "higher" if weighted > summary["mean"] else "lower"
        lines.append(
            f"The volume-weighted rate is {relation} than the simple average,"
            f" so larger transactions tend to clear at {relation} rates."
        )
    if rates["rate_change"] == 0:
        lines.append("The latest rate is unchanged on the previous observation.")
    elif rates["rate_change"] is not None:
        lines.append(
            f"The latest rate moved {_direction(rates['rate_change'], 'up', 'down')}"
            f" {utils.format_percent(abs(rates['rate_change']))}."
        )
    return lines


def _daily_insights(payload: DashboardPayload) -> list[str]:
    daily = payload["daily"]
    lines: list[str] = []
    if daily["avg_daily_volume"] is not None:
        lines.append(
            f"Days average {utils.format_currency(daily['avg_daily_volume'], decimals=0)} across"
            f" {utils.format_number(daily['avg_daily_count'], decimals=1)} transactions."
        )
    if daily["volume_change"] is not None:
        lines.append(
            f"The latest day is {_direction(daily['volume_change'], 'up', 'down')}"
            f" {utils.format_percent(abs(daily['volume_change']))} on the day before."
        )
    return lines


def section_insights(payload: DashboardPayload) -> dict[str, list[str]]:
    """Return insight bullets keyed by dashboard section."""

    return {
        "monthly": _monthly_insights(payload),
        "velocity": _velocity_insights(payload),
        "processing": _processing_insights(payload),
        "segments": _segment_insights(payload),
        "currency": _currency_insights(payload),
        "weekday": _weekday_insights(payload),
        "exchange_rates": _rate_insights(payload),
        "daily": _daily_insights(payload),
    }


def headline_summary(payload: DashboardPayload, *, settlement_symbol: str = "₦") -> str:
    """Return a compact, deterministic summary of the whole dashboard."""

    summary = payload["summary"]
    overview = payload["overview"]
    days = payload["daily"]["days"]

    if not summary["total_count"]:
        return "Highlights — No transactions in the selected window."

    period = f" from {days[0]['date']} to {days[-1]['date']}" if days else ""
    growth_text = ""
    if summary["volume_growth"] is not None:
        arrow = "↑" if summary["volume_growth"] > 0 else ("↓" if summary["volume_growth"] < 0 else "→")
        growth_text = f" Customer volume {arrow} {utils.format_percent(abs(summary['volume_growth']))} vs last month."

    rate_text = ""
    weighted = overview["volume_weighted_rate"]
    if weighted is not None:
        rate_text = f" The volume-weighted rate is {settlement_symbol}{weighted:,.2f}."

    customer_total = utils.format_currency(summary["total_volume"])
    settlement_total = utils.format_currency(overview["total_volume"], settlement_symbol)
    payment_share = utils.format_percent(overview["payment_share"])
    return (
        f"Highlights — Across {summary['total_count']:,} transactions{period}, customers were charged"
        f" {customer_total} and {settlement_total} settled;"
        f" payments make up {payment_share} of rows.{growth_text}{rate_text}"
    )
