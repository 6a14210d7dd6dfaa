"""Aggregation helpers for the payments dashboard.

Every public function takes the full transaction sequence (records or an
engineered frame) and returns a JSON-friendly payload for one dashboard panel.
Nothing is shared between calls. Each one derives its own frame and
accumulators.

Two volume families exist and are never mixed:

- ``customer_volume``: ``|customer_facing_amount|``, or 0 when absent.
- ``settlement_volume``: ``|amount|``, used by :func:`settlement_overview`.

Undefined ratios (empty groups, zero denominators) are reported as ``None``.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from typing import TypedDict

import numpy as np
import pandas as pd

from . import features, stats
from .config import DEFAULT_CONFIG, DashboardConfig
from .logging_setup import get_logger
from .models import Transaction

logger = get_logger(__name__)

TransactionsLike = Iterable[Transaction] | pd.DataFrame

VALUE_SEGMENTS: tuple[tuple[str, float, float], ...] = (
    ("Micro (< $100)", 0.0, 100.0),
    ("Small ($100-500)", 100.0, 500.0),
    ("Medium ($500-1K)", 500.0, 1_000.0),
    ("Large ($1K-5K)", 1_000.0, 5_000.0),
    ("Enterprise (> $5K)", 5_000.0, math.inf),
)

# Upper bounds in minutes, inclusive. Anything above the last bound is "More".
PROCESSING_INTERVALS = (5, 15, 30, 60, 120)
FAST_PROCESSING_MINUTES = 15
HIGH_VARIABILITY_RATIO = 0.5

FAST_SETTLEMENT_HOURS = 24
SLOW_SETTLEMENT_HOURS = 48
SMALL_PAYMENT_LIMIT = 10_000
MEDIUM_PAYMENT_LIMIT = 50_000
SMALL_TICKET_LIMIT = 50
MEDIUM_TICKET_LIMIT = 100

TOP_HOURS = 5
RECENT_MONTHS = 3
DAYS_PER_MONTH = 30


class GroupSummary(TypedDict):
    label: str
    count: int
    volume: float
    avg_size: float | None


class DatedGroup(GroupSummary):
    date: str


class MonthlyEntry(DatedGroup):
    growth: float | None


class CurrencyEntry(GroupSummary):
    volume_share: float | None
    count_share: float | None


class SegmentEntry(TypedDict):
    label: str
    lower: float
    upper: float | None
    count: int
    volume: float
    count_share: float | None
    volume_share: float | None


class BucketEntry(TypedDict):
    label: str
    upper: float | None
    count: int
    share: float | None


class RatePoint(TypedDict):
    date: str
    label: str
    rate: float
    volume: float
    moving_average: float | None


class DailyProcessing(TypedDict):
    date: str
    label: str
    count: int
    avg_time: float | None
    min_time: float | None
    max_time: float | None
    std_dev: float | None
    total_time: float


class DailyVolume(TypedDict):
    days: list[DatedGroup]
    total_volume: float
    total_count: int
    avg_daily_volume: float | None
    avg_daily_count: float | None
    volume_change: float | None
    count_change: float | None


class HourlyVelocity(TypedDict):
    hours: list[GroupSummary]
    top_hours: list[GroupSummary]
    peak_hour: str | None
    peak_volume_hour: str | None
    total_count: int
    avg_per_hour: float | None
    median_per_hour: float | None
    std_dev_per_hour: float | None


class WeekdayDistribution(TypedDict):
    days: list[GroupSummary]
    peak_day: str | None
    peak_day_volume: float | None
    peak_day_count: int | None
    avg_daily_count: float
    total_count: int
    total_volume: float


class MonthlyTrends(TypedDict):
    months: list[MonthlyEntry]
    total_volume: float
    avg_monthly_volume: float | None
    latest_growth: float | None
    avg_growth_rate: float | None
    growth_volatility: float | None
    highest_volume: float | None


class CurrencyDistribution(TypedDict):
    currencies: list[CurrencyEntry]
    primary_currency: str | None
    primary_share: float | None
    currency_count: int
    total_volume: float
    total_count: int
    avg_transaction_size: float | None


class ExchangeRates(TypedDict):
    currency: str
    points: list[RatePoint]
    stats: stats.SeriesStats
    volume_weighted_rate: float | None
    latest_rate: float | None
    previous_rate: float | None
    rate_change: float | None
    weighted_vs_simple: float | None


class ValueSegments(TypedDict):
    segments: list[SegmentEntry]
    total_count: int
    total_volume: float


class ProcessingEfficiency(TypedDict):
    buckets: list[BucketEntry]
    stats: stats.SeriesStats
    fast_share: float | None
    variability: str | None
    skew: str | None


class ProcessingTrend(TypedDict):
    days: list[DailyProcessing]
    overall_avg: float | None
    time_change: float | None
    trend: float | None
    best_day: str | None
    worst_day: str | None
    daily_variation: float | None


class MonthlySettlement(TypedDict):
    label: str
    date: str
    volume: float
    growth: float | None


class SettlementOverview(TypedDict):
    payment_count: int
    total_count: int
    total_volume: float
    avg_transaction_size: float | None
    average_ticket_size: float | None
    largest_transaction: float | None
    payment_share: float | None
    rated_count: int
    avg_rate: float | None
    min_rate: float | None
    max_rate: float | None
    volume_weighted_rate: float | None
    total_customer_volume: float
    rate_spread: float | None
    weighted_spread: float | None
    peak_hour: str | None
    monthly_volumes: list[MonthlySettlement]
    month_over_month: float | None
    period_growth: float | None
    volume_per_day: float | None
    current_month_vs_average: float | None
    avg_processing_hours: float | None
    processing_bands: list[BucketEntry]
    amount_ranges: list[BucketEntry]
    ticket_bands: list[BucketEntry]


class TransactionSummary(TypedDict):
    total_volume: float
    total_count: int
    avg_transaction_size: float | None
    volume_growth: float | None
    count_growth: float | None
    recent_months: list[MonthlyEntry]


class DashboardPayload(TypedDict):
    summary: TransactionSummary
    overview: SettlementOverview
    daily: DailyVolume
    hourly: HourlyVelocity
    weekday: WeekdayDistribution
    monthly: MonthlyTrends
    currency: CurrencyDistribution
    exchange_rates: ExchangeRates
    value_segments: ValueSegments
    processing: ProcessingEfficiency
    processing_trend: ProcessingTrend


def _optional(value: object) -> float | None:
    if value is None:
        return None
    value = float(value)
    return value if math.isfinite(value) else None


def group_by(
    frame: pd.DataFrame,
    key: str,
    *,
    volume: str = "customer_volume",
    categories: Sequence[str] | None = None,
) -> pd.DataFrame:
    """Fold rows into per-key ``count`` and ``volume`` with ``avg_size``.

    Rows whose key is null are dropped. Groups come back in natural key order,
    or in ``categories`` order when given, in which case unseen categories
    appear with ``count == 0`` and ``avg_size`` of ``NaN``.
    """

    valid = frame.loc[frame[key].notna()]
    grouped = valid.groupby(key, sort=True, observed=True)[volume].agg(["size", "sum"])
    grouped.columns = ["count", "volume"]
    if categories is not None:
        grouped = grouped.reindex(list(categories), fill_value=0)
    grouped["count"] = grouped["count"].astype("int64")
    grouped["volume"] = grouped["volume"].astype(float)
    grouped["avg_size"] = grouped["volume"] / grouped["count"].replace(0, np.nan)
    return grouped


def _summaries(grouped: pd.DataFrame) -> list[GroupSummary]:
    return [
        {
            "label": str(key),
            "count": int(row["count"]),
            "volume": float(row["volume"]),
            "avg_size": _optional(row["avg_size"]),
        }
        for key, row in grouped.iterrows()
    ]


def _dated(grouped: pd.DataFrame, label_format: str) -> list[DatedGroup]:
    return [
        {
            "label": key.strftime(label_format),
            "date": key.strftime("%Y-%m-%d"),
            "count": int(row["count"]),
            "volume": float(row["volume"]),
            "avg_size": _optional(row["avg_size"]),
        }
        for key, row in grouped.iterrows()
    ]


def _bucket_entries(
    counts: pd.Series,
    uppers: Sequence[float | None],
    total: int,
) -> list[BucketEntry]:
    return [
        {
            "label": str(label),
            "upper": upper,
            "count": int(count),
            "share": stats.percentage(int(count), total),
        }
        for (label, count), upper in zip(counts.items(), uppers)
    ]


def daily_volume(transactions: TransactionsLike) -> DailyVolume:
    """Customer volume and count per calendar day, oldest first."""

    df = features.ensure_features(transactions)
    grouped = group_by(df, "day")
    days = _dated(grouped, "%b %d")

    total_volume = float(grouped["volume"].sum())
    total_count = int(grouped["count"].sum())

    volume_change = count_change = None
    if len(days) >= 2:
        latest, previous = days[-1], days[-2]
        volume_change = stats.growth_rate(latest["volume"], previous["volume"])
        count_change = stats.growth_rate(latest["count"], previous["count"])

    return {
        "days": days,
        "total_volume": total_volume,
        "total_count": total_count,
        "avg_daily_volume": stats.ratio(total_volume, len(days)),
        "avg_daily_count": stats.ratio(total_count, len(days)),
        "volume_change": volume_change,
        "count_change": count_change,
    }


def hourly_velocity(transactions: TransactionsLike) -> HourlyVelocity:
    """Transactions per ``HH:00`` hour of day with peak and spread statistics."""

    df = features.ensure_features(transactions)
    grouped = group_by(df, "hour")
    hours = _summaries(grouped)

    if not hours:
        return {
            "hours": [],
            "top_hours": [],
            "peak_hour": None,
            "peak_volume_hour": None,
            "total_count": 0,
            "avg_per_hour": None,
            "median_per_hour": None,
            "std_dev_per_hour": None,
        }

    counts = grouped["count"]
    top_hours = sorted(hours, key=lambda entry: entry["count"], reverse=True)[:TOP_HOURS]

    return {
        "hours": hours,
        "top_hours": top_hours,
        "peak_hour": str(counts.idxmax()),
        "peak_volume_hour": str(grouped["volume"].idxmax()),
        "total_count": int(counts.sum()),
        "avg_per_hour": stats.mean(counts),
        "median_per_hour": stats.median_upper(counts),
        "std_dev_per_hour": stats.population_std(counts),
    }


def weekday_distribution(transactions: TransactionsLike) -> WeekdayDistribution:
    """Seven entries, Sunday to Saturday, including days with no activity."""

    df = features.ensure_features(transactions)
    grouped = group_by(df, "weekday", categories=features.WEEKDAYS)
    days = _summaries(grouped)

    total_count = int(grouped["count"].sum())
    total_volume = float(grouped["volume"].sum())

    peak_day: str | None = None
    peak_day_volume: float | None = None
    peak_day_count: int | None = None
    if total_count:
        peak_day = str(grouped["count"].idxmax())
        peak_day_volume = float(grouped.loc[peak_day, "volume"])
        peak_day_count = int(grouped.loc[peak_day, "count"])

    return {
        "days": days,
        "peak_day": peak_day,
        "peak_day_volume": peak_day_volume,
        "peak_day_count": peak_day_count,
        "avg_daily_count": total_count / len(features.WEEKDAYS),
        "total_count": total_count,
        "total_volume": total_volume,
    }


def _monthly_entries(grouped: pd.DataFrame) -> list[MonthlyEntry]:
    entries: list[MonthlyEntry] = []
    previous: float | None = None
    for entry in _dated(grouped, "%b %Y"):
        entries.append({**entry, "growth": stats.growth_rate(entry["volume"], previous)})
        previous = entry["volume"]
    return entries


def monthly_trends(transactions: TransactionsLike) -> MonthlyTrends:
    """Monthly customer volume in calendar order with month-over-month growth."""

    df = features.ensure_features(transactions)
    months = _monthly_entries(group_by(df, "month"))

    volumes = [entry["volume"] for entry in months]
    growth_rates = [entry["growth"] for entry in months[1:] if entry["growth"] is not None]
    total_volume = float(sum(volumes))

    return {
        "months": months,
        "total_volume": total_volume,
        "avg_monthly_volume": stats.ratio(total_volume, len(months)),
        "latest_growth": months[-1]["growth"] if len(months) > 1 else None,
        "avg_growth_rate": stats.mean(growth_rates),
        "growth_volatility": stats.population_std(growth_rates),
        "highest_volume": max(volumes) if volumes else None,
    }


def currency_distribution(transactions: TransactionsLike) -> CurrencyDistribution:
    """Customer-facing currency mix, largest volume first."""

    df = features.ensure_features(transactions)
    grouped = group_by(df, "currency_key")

    total_volume = float(grouped["volume"].sum())
    total_count = int(grouped["count"].sum())

    currencies: list[CurrencyEntry] = [
        {
            **summary,
            "volume_share": stats.percentage(summary["volume"], total_volume),
            "count_share": stats.percentage(summary["count"], total_count),
        }
        for summary in _summaries(grouped)
    ]
    currencies.sort(key=lambda entry: entry["volume"], reverse=True)

    primary = currencies[0] if currencies else None
    return {
        "currencies": currencies,
        "primary_currency": primary["label"] if primary else None,
        "primary_share": primary["volume_share"] if primary else None,
        "currency_count": len(currencies),
        "total_volume": total_volume,
        "total_count": total_count,
        "avg_transaction_size": stats.ratio(total_volume, total_count),
    }


def exchange_rates(
    transactions: TransactionsLike,
    config: DashboardConfig = DEFAULT_CONFIG,
) -> ExchangeRates:
    """Implied settlement/customer rate per transaction, oldest first.

    Only rows charged in ``config.rate_currency`` with a non-zero
    customer-facing amount and a valid ``created`` timestamp take part.
    """

    df = features.ensure_features(transactions)
    charged = df["customer_facing_currency"].fillna("").astype(str).str.strip().str.lower()
    mask = (
        (charged == config.rate_currency.lower())
        & df["has_customer_amount"]
        & df["created_at"].notna()
    )
    rated = df.loc[mask].sort_values("created_at", kind="mergesort").copy()
    rated["rate"] = (rated["amount"] / rated["customer_facing_amount"]).abs()
    rated = rated.loc[np.isfinite(rated["rate"])]

    rates = rated["rate"].astype(float).tolist()
    volumes = rated["customer_volume"].astype(float).tolist()
    averages = stats.moving_average(rates, config.moving_average_window)

    points: list[RatePoint] = [
        {
            "date": ts.strftime("%Y-%m-%d %H:%M"),
            "label": ts.strftime("%b %d"),
            "rate": rate,
            "volume": volume,
            "moving_average": average,
        }
        for ts, rate, volume, average in zip(rated["created_at"], rates, volumes, averages)
    ]

    summary = stats.describe(rates)
    weighted = stats.weighted_mean(rates, volumes)
    latest_rate = rates[-1] if rates else None
    previous_rate = rates[-2] if len(rates) >= 2 else latest_rate

    return {
        "currency": config.rate_currency.upper(),
        "points": points,
        "stats": summary,
        "volume_weighted_rate": weighted,
        "latest_rate": latest_rate,
        "previous_rate": previous_rate,
        "rate_change": stats.growth_rate(latest_rate, previous_rate),
        "weighted_vs_simple": stats.growth_rate(weighted, summary["mean"]),
    }


def value_segments(transactions: TransactionsLike) -> ValueSegments:
    """Bucket customer volume into half-open ``[lower, upper)`` segments."""

    df = features.ensure_features(transactions)
    labels = [label for label, _, _ in VALUE_SEGMENTS]
    edges = [lower for _, lower, _ in VALUE_SEGMENTS] + [VALUE_SEGMENTS[-1][2]]
    df["segment"] = pd.cut(df["customer_volume"], bins=edges, labels=labels, right=False).astype(object)
    grouped = group_by(df, "segment", categories=labels)

    total_count = int(grouped["count"].sum())
    total_volume = float(grouped["volume"].sum())

    segments: list[SegmentEntry] = []
    for label, lower, upper in VALUE_SEGMENTS:
        count = int(grouped.loc[label, "count"])
        volume = float(grouped.loc[label, "volume"])
        segments.append(
            {
                "label": label,
                "lower": lower,
                "upper": upper if math.isfinite(upper) else None,
                "count": count,
                "volume": volume,
                "count_share": stats.percentage(count, total_count),
                "volume_share": stats.percentage(volume, total_volume),
            }
        )

    return {"segments": segments, "total_count": total_count, "total_volume": total_volume}


def _processing_labels() -> list[str]:
    return [f"≤ {upper} min" for upper in PROCESSING_INTERVALS] + ["More"]


def processing_efficiency(transactions: TransactionsLike) -> ProcessingEfficiency:
    """Distribution of minutes between ``created`` and ``available_on``.

    Rows missing either timestamp are left out. Rows whose timestamps do not
    parse contribute a latency of 0.
    """

    df = features.ensure_features(transactions)
    present = (df["created"].fillna("").astype(str) != "") & (
        df["available_on"].fillna("").astype(str) != ""
    )
    times = df.loc[present, "processing_minutes"].astype(float)

    labels = _processing_labels()
    bins = [-math.inf, *PROCESSING_INTERVALS, math.inf]
    assigned = pd.cut(times, bins=bins, labels=labels, right=True).astype(object)
    counts = assigned.value_counts().reindex(labels, fill_value=0)
    buckets = _bucket_entries(counts, [*PROCESSING_INTERVALS, None], len(times))

    summary = stats.describe(times)
    spread = stats.ratio(summary["std_dev"], summary["mean"])
    variability = None if spread is None else ("high" if spread > HIGH_VARIABILITY_RATIO else "moderate")
    skew = None
    if summary["median"] is not None and summary["mean"] is not None:
        skew = "positive" if summary["median"] < summary["mean"] else "negative"

    return {
        "buckets": buckets,
        "stats": summary,
        "fast_share": stats.percentage(int((times <= FAST_PROCESSING_MINUTES).sum()), len(times)),
        "variability": variability,
        "skew": skew,
    }


def processing_trend(transactions: TransactionsLike) -> ProcessingTrend:
    """Daily processing-time statistics over positive latencies only."""

    df = features.ensure_features(transactions)
    dated = df.loc[df["created_at"].notna()]

    days: list[DailyProcessing] = []
    for day, group in dated.groupby("day", sort=True):
        times = group.loc[group["processing_minutes"] > 0, "processing_minutes"].astype(float)
        summary = stats.describe(times)
        days.append(
            {
                "date": day.strftime("%Y-%m-%d"),
                "label": day.strftime("%b %d"),
                "count": summary["count"],
                "avg_time": summary["mean"],
                "min_time": summary["min"],
                "max_time": summary["max"],
                "std_dev": summary["std_dev"],
                "total_time": float(times.sum()),
            }
        )

    active = [entry for entry in days if entry["count"] > 0]
    time_change = trend = None
    if len(active) >= 2:
        time_change = stats.growth_rate(active[-1]["avg_time"], active[-2]["avg_time"])
        trend = stats.growth_rate(active[-1]["avg_time"], active[0]["avg_time"])

    return {
        "days": days,
        "overall_avg": stats.ratio(
            sum(entry["total_time"] for entry in active),
            sum(entry["count"] for entry in active),
        ),
        "time_change": time_change,
        "trend": trend,
        "best_day": min(active, key=lambda entry: entry["avg_time"])["label"] if active else None,
        "worst_day": max(active, key=lambda entry: entry["avg_time"])["label"] if active else None,
        "daily_variation": stats.mean(entry["std_dev"] for entry in active),
    }


def _settlement_months(payments: pd.DataFrame) -> list[MonthlySettlement]:
    grouped = group_by(payments, "month", volume="settlement_volume")
    months: list[MonthlySettlement] = []
    previous: float | None = None
    for month, row in grouped.iterrows():
        volume = float(row["volume"])
        months.append(
            {
                "label": month.strftime("%b %Y"),
                "date": month.strftime("%Y-%m-%d"),
                "volume": volume,
                "growth": stats.growth_rate(volume, previous),
            }
        )
        previous = volume
    return months


def settlement_overview(transactions: TransactionsLike) -> SettlementOverview:
    """Headline settlement-currency metrics over ``payment`` rows."""

    df = features.ensure_features(transactions)
    payments = df.loc[df["type"] == "payment"]
    total_count = len(df)
    payment_count = len(payments)
    total_volume = float(payments["settlement_volume"].sum())

    rated = payments.loc[payments["has_customer_amount"]].copy()
    rated["rate"] = (rated["amount"] / rated["customer_facing_amount"]).abs()
    rated = rated.loc[np.isfinite(rated["rate"])]
    rates = rated["rate"].astype(float)
    rate_summary = stats.describe(rates)
    weighted = stats.weighted_mean(rates, rated["customer_facing_amount"].astype(float))
    rate_range = (
        rate_summary["max"] - rate_summary["min"] if rate_summary["count"] else None
    )

    hourly = group_by(payments, "hour", volume="settlement_volume")
    months = _settlement_months(payments)
    month_over_month = months[-1]["growth"] if len(months) >= 2 else None
    period_growth = (
        stats.growth_rate(months[-1]["volume"], months[0]["volume"]) if len(months) >= 2 else None
    )
    avg_monthly_volume = stats.ratio(total_volume, len(months))

    hours = payments["processing_hours"].astype(float)
    processing_counts = pd.Series(
        {
            f"≤ {FAST_SETTLEMENT_HOURS}h": int((hours <= FAST_SETTLEMENT_HOURS).sum()),
            f"{FAST_SETTLEMENT_HOURS}-{SLOW_SETTLEMENT_HOURS}h": int(
                ((hours > FAST_SETTLEMENT_HOURS) & (hours <= SLOW_SETTLEMENT_HOURS)).sum()
            ),
            f"> {SLOW_SETTLEMENT_HOURS}h": int((hours > SLOW_SETTLEMENT_HOURS).sum()),
        }
    )

    sizes = payments["settlement_volume"]
    small = int((sizes < SMALL_PAYMENT_LIMIT).sum())
    medium = int(((sizes >= SMALL_PAYMENT_LIMIT) & (sizes < MEDIUM_PAYMENT_LIMIT)).sum())
    amount_counts = pd.Series(
        {
            "Small (< 10k)": small,
            "Medium (10k-50k)": medium,
            "Large (> 50k)": payment_count - small - medium,
        }
    )

    customer = df["customer_facing_amount"]
    charged = df["has_customer_amount"]
    ticket_counts = pd.Series(
        {
            f"≤ {SMALL_TICKET_LIMIT}": int((charged & (customer <= SMALL_TICKET_LIMIT)).sum()),
            f"{SMALL_TICKET_LIMIT}-{MEDIUM_TICKET_LIMIT}": int(
                (charged & (customer > SMALL_TICKET_LIMIT) & (customer <= MEDIUM_TICKET_LIMIT)).sum()
            ),
            f"> {MEDIUM_TICKET_LIMIT}": int((charged & (customer > MEDIUM_TICKET_LIMIT)).sum()),
        }
    )

    largest = df["settlement_volume"].max() if total_count else None

    return {
        "payment_count": payment_count,
        "total_count": total_count,
        "total_volume": total_volume,
        "avg_transaction_size": stats.ratio(total_volume, total_count),
        "average_ticket_size": stats.ratio(total_volume, payment_count),
        "largest_transaction": _optional(largest),
        "payment_share": stats.percentage(payment_count, total_count),
        "rated_count": rate_summary["count"],
        "avg_rate": rate_summary["mean"],
        "min_rate": rate_summary["min"],
        "max_rate": rate_summary["max"],
        "volume_weighted_rate": weighted,
        "total_customer_volume": float(rated["customer_facing_amount"].sum()),
        "rate_spread": stats.percentage(rate_range, rate_summary["mean"]),
        "weighted_spread": stats.percentage(rate_range, weighted),
        "peak_hour": str(hourly["count"].idxmax()) if not hourly.empty else None,
        "monthly_volumes": months,
        "month_over_month": month_over_month,
        "period_growth": period_growth,
        "volume_per_day": stats.ratio(total_volume, len(months) * DAYS_PER_MONTH),
        "current_month_vs_average": stats.percentage(
            months[-1]["volume"] if months else None, avg_monthly_volume
        ),
        "avg_processing_hours": stats.mean(hours),
        "processing_bands": _bucket_entries(
            processing_counts, [FAST_SETTLEMENT_HOURS, SLOW_SETTLEMENT_HOURS, None], payment_count
        ),
        "amount_ranges": _bucket_entries(
            amount_counts, [SMALL_PAYMENT_LIMIT, MEDIUM_PAYMENT_LIMIT, None], payment_count
        ),
        "ticket_bands": _bucket_entries(
            ticket_counts,
            [SMALL_TICKET_LIMIT, MEDIUM_TICKET_LIMIT, None],
            int(customer.notna().sum()),
        ),
    }


def transaction_summary(transactions: TransactionsLike) -> TransactionSummary:
    """Headline customer-volume totals with month-over-month growth."""

    df = features.ensure_features(transactions)
    months = _monthly_entries(group_by(df, "month"))
    total_volume = float(df["customer_volume"].sum())
    total_count = len(df)

    volume_growth = count_growth = None
    if len(months) >= 2:
        latest, previous = months[-1], months[-2]
        volume_growth = stats.growth_rate(latest["volume"], previous["volume"])
        count_growth = stats.growth_rate(latest["count"], previous["count"])

    return {
        "total_volume": total_volume,
        "total_count": total_count,
        "avg_transaction_size": stats.ratio(total_volume, total_count),
        "volume_growth": volume_growth,
        "count_growth": count_growth,
        "recent_months": months[-RECENT_MONTHS:],
    }


def build_dashboard(
    transactions: TransactionsLike,
    config: DashboardConfig | None = None,
) -> DashboardPayload:
    """Compute every panel payload from one transaction sequence."""

    config = config or DEFAULT_CONFIG
    df = features.ensure_features(transactions)
    logger.debug("Building dashboard payload for %d transaction(s)", len(df))

    return {
        "summary": transaction_summary(df),
        "overview": settlement_overview(df),
        "daily": daily_volume(df),
        "hourly": hourly_velocity(df),
        "weekday": weekday_distribution(df),
        "monthly": monthly_trends(df),
        "currency": currency_distribution(df),
        "exchange_rates": exchange_rates(df, config),
        "value_segments": value_segments(df),
        "processing": processing_efficiency(df),
        "processing_trend": processing_trend(df),
    }
