"""Tests for the per-panel aggregation payloads."""

from __future__ import annotations

import pytest

from txn_analytics import features, insights
from txn_analytics.config import DashboardConfig


def test_exchange_rates_volume_weighted_rate(make_txn) -> None:
    transactions = [
        make_txn(id="a", amount=100.0, customer_facing_amount=50.0, customer_facing_currency="usd"),
        make_txn(
            id="b",
            amount=300.0,
            customer_facing_amount=100.0,
            customer_facing_currency="USD",
            created="2024-01-02 10:00:00",
        ),
        make_txn(id="c", amount=900.0, customer_facing_amount=100.0, customer_facing_currency="gbp"),
        make_txn(id="d", amount=900.0, customer_facing_amount=None, customer_facing_currency="usd"),
    ]
    rates = insights.exchange_rates(transactions)

    assert rates["currency"] == "USD"
    assert [point["rate"] for point in rates["points"]] == pytest.approx([2.0, 3.0])
    assert rates["volume_weighted_rate"] == pytest.approx(2.6667, abs=1e-4)
    assert rates["stats"]["mean"] == pytest.approx(2.5)
    assert rates["latest_rate"] == pytest.approx(3.0)
    assert rates["previous_rate"] == pytest.approx(2.0)
    assert rates["rate_change"] == pytest.approx(50.0)
    assert all(point["moving_average"] is None for point in rates["points"])


def test_exchange_rates_follow_configured_currency(make_txn) -> None:
    transactions = [
        make_txn(id="a", amount=160.0, customer_facing_amount=100.0, customer_facing_currency="gbp"),
        make_txn(id="b", amount=100.0, customer_facing_amount=100.0, customer_facing_currency="usd"),
    ]
    rates = insights.exchange_rates(transactions, DashboardConfig(rate_currency="gbp", moving_average_window=1))

    assert rates["currency"] == "GBP"
    assert [point["rate"] for point in rates["points"]] == pytest.approx([1.6])
    assert rates["points"][0]["moving_average"] == pytest.approx(1.6)
    assert rates["previous_rate"] == rates["latest_rate"]
    assert rates["rate_change"] == pytest.approx(0.0)


def test_exchange_rates_empty_when_no_rated_rows(make_txn) -> None:
    rates = insights.exchange_rates([make_txn(customer_facing_amount=0.0)])
    assert rates["points"] == []
    assert rates["volume_weighted_rate"] is None
    assert rates["latest_rate"] is None


def test_weekday_distribution_always_has_seven_days(make_txn) -> None:
    weekday = insights.weekday_distribution([make_txn(created="2024-01-01 10:00:00")])

    assert [entry["label"] for entry in weekday["days"]] == list(features.WEEKDAYS)
    sunday = weekday["days"][0]
    assert sunday["count"] == 0
    assert sunday["avg_size"] is None
    assert weekday["peak_day"] == "Monday"
    assert weekday["peak_day_count"] == 1
    assert weekday["avg_daily_count"] == pytest.approx(1 / 7)


def test_group_by_partitions_rows_with_valid_keys(make_txn) -> None:
    df = features.add_engineered_features(
        [
            make_txn(id="a", created="2024-01-01 08:00:00", customer_facing_amount=10.0),
            make_txn(id="b", created="2024-01-01 09:00:00", customer_facing_amount=30.0),
            make_txn(id="c", created="2024-01-02 09:00:00", customer_facing_amount=None),
            make_txn(id="d", created="not a date"),
        ]
    )
    grouped = insights.group_by(df, "day")

    assert int(grouped["count"].sum()) == 3
    assert grouped["volume"].tolist() == [40.0, 0.0]
    assert grouped["avg_size"].tolist() == [20.0, 0.0]


def test_daily_volume_entries_and_changes(make_txn) -> None:
    daily = insights.daily_volume(
        [
            make_txn(id="a", created="2024-01-02 08:00:00", customer_facing_amount=50.0),
            make_txn(id="b", created="2024-01-01 08:00:00", customer_facing_amount=100.0),
            make_txn(id="c", created="2024-01-02 12:00:00", customer_facing_amount=100.0),
        ]
    )

    assert [entry["date"] for entry in daily["days"]] == ["2024-01-01", "2024-01-02"]
    assert [entry["label"] for entry in daily["days"]] == ["Jan 01", "Jan 02"]
    for entry in daily["days"]:
        assert entry["avg_size"] == pytest.approx(entry["volume"] / entry["count"])
    assert daily["total_count"] == 3
    assert daily["avg_daily_volume"] == pytest.approx(125.0)
    assert daily["volume_change"] == pytest.approx(50.0)
    assert daily["count_change"] == pytest.approx(100.0)


def test_hourly_velocity_peaks(make_txn) -> None:
    hourly = insights.hourly_velocity(
        [
            make_txn(id="a", created="2024-01-01 09:05:00", customer_facing_amount=10.0),
            make_txn(id="b", created="2024-01-02 09:55:00", customer_facing_amount=10.0),
            make_txn(id="c", created="2024-01-01 14:00:00", customer_facing_amount=500.0),
        ]
    )

    assert [entry["label"] for entry in hourly["hours"]] == ["09:00", "14:00"]
    assert hourly["peak_hour"] == "09:00"
    assert hourly["peak_volume_hour"] == "14:00"
    assert hourly["top_hours"][0]["label"] == "09:00"
    assert hourly["avg_per_hour"] == pytest.approx(1.5)
    assert hourly["median_per_hour"] == 2
    assert hourly["std_dev_per_hour"] == pytest.approx(0.5)


def test_hourly_velocity_without_dated_rows(make_txn) -> None:
    hourly = insights.hourly_velocity([make_txn(created="")])
    assert hourly["hours"] == []
    assert hourly["peak_hour"] is None
    assert hourly["avg_per_hour"] is None


def test_monthly_trends_are_chronological(make_txn) -> None:
    monthly = insights.monthly_trends(
        [
            make_txn(id="feb", created="2024-02-10 10:00:00", customer_facing_amount=100.0),
            make_txn(id="dec", created="2023-12-10 10:00:00", customer_facing_amount=100.0),
            make_txn(id="jan", created="2024-01-10 10:00:00", customer_facing_amount=200.0),
        ]
    )

    assert [entry["label"] for entry in monthly["months"]] == ["Dec 2023", "Jan 2024", "Feb 2024"]
    assert [entry["growth"] for entry in monthly["months"]] == [None, pytest.approx(100.0), pytest.approx(-50.0)]
    assert monthly["latest_growth"] == pytest.approx(-50.0)
    assert monthly["avg_growth_rate"] == pytest.approx(25.0)
    assert monthly["growth_volatility"] == pytest.approx(75.0)
    assert monthly["highest_volume"] == pytest.approx(200.0)
    assert monthly["avg_monthly_volume"] == pytest.approx(400.0 / 3)


def test_currency_distribution_sorted_by_volume(make_txn) -> None:
    currency = insights.currency_distribution(
        [
            make_txn(id="a", customer_facing_amount=10.0, customer_facing_currency="gbp"),
            make_txn(id="b", customer_facing_amount=60.0, customer_facing_currency="usd"),
            make_txn(id="c", customer_facing_amount=30.0, customer_facing_currency="USD"),
            make_txn(id="d", customer_facing_amount=None, customer_facing_currency=None),
        ]
    )

    assert [entry["label"] for entry in currency["currencies"]] == ["USD", "GBP", "UNKNOWN"]
    assert currency["primary_currency"] == "USD"
    assert currency["primary_share"] == pytest.approx(90.0)
    assert currency["currencies"][0]["count_share"] == pytest.approx(50.0)
    assert currency["currency_count"] == 3
    assert currency["avg_transaction_size"] == pytest.approx(25.0)


def test_value_segments_are_exhaustive_and_half_open(make_txn) -> None:
    amounts = [50.0, 100.0, 499.99, 5_000.0, None]
    segments = insights.value_segments(
        [make_txn(id=str(index), customer_facing_amount=amount) for index, amount in enumerate(amounts)]
    )

    counts = {entry["label"]: entry["count"] for entry in segments["segments"]}
    assert counts == {
        "Micro (< $100)": 2,
        "Small ($100-500)": 2,
        "Medium ($500-1K)": 0,
        "Large ($1K-5K)": 0,
        "Enterprise (> $5K)": 1,
    }
    assert sum(counts.values()) == segments["total_count"] == len(amounts)
    assert segments["segments"][-1]["upper"] is None
    assert segments["segments"][2]["count_share"] == 0.0


def test_processing_efficiency_buckets(make_txn) -> None:
    transactions = [
        make_txn(id="a", available_on="2024-01-01 10:05:00"),
        make_txn(id="b", available_on="2024-01-01 10:06:00"),
        make_txn(id="c", available_on="2024-01-01 12:00:00"),
        make_txn(id="d", available_on="2024-01-01 12:01:00"),
        make_txn(id="e", available_on=""),
    ]
    processing = insights.processing_efficiency(transactions)

    counts = {entry["label"]: entry["count"] for entry in processing["buckets"]}
    assert counts == {
        "≤ 5 min": 1,
        "≤ 15 min": 1,
        "≤ 30 min": 0,
        "≤ 60 min": 0,
        "≤ 120 min": 1,
        "More": 1,
    }
    assert processing["stats"]["count"] == 4
    assert processing["fast_share"] == pytest.approx(50.0)
    assert processing["buckets"][-1]["upper"] is None
    assert processing["skew"] == "negative"


def test_processing_trend_ignores_instant_availability(make_txn) -> None:
    trend = insights.processing_trend(
        [
            make_txn(id="a", created="2024-01-01 10:00:00", available_on="2024-01-01 10:10:00"),
            make_txn(id="b", created="2024-01-01 11:00:00", available_on="2024-01-01 11:00:00"),
            make_txn(id="c", created="2024-01-02 10:00:00", available_on="2024-01-02 10:30:00"),
        ]
    )

    assert [entry["count"] for entry in trend["days"]] == [1, 1]
    assert [entry["avg_time"] for entry in trend["days"]] == [10.0, 30.0]
    assert trend["overall_avg"] == pytest.approx(20.0)
    assert trend["time_change"] == pytest.approx(200.0)
    assert trend["best_day"] == "Jan 01"
    assert trend["worst_day"] == "Jan 02"


def test_settlement_overview_uses_payments_only(make_txn) -> None:
    transactions = [
        make_txn(id="a", amount=1000.0, customer_facing_amount=100.0),
        make_txn(
            id="b",
            amount=3000.0,
            customer_facing_amount=200.0,
            created="2024-01-01 14:00:00",
            available_on="2024-01-01 14:10:00",
        ),
        make_txn(
            id="p",
            type="payout",
            amount=-2000.0,
            customer_facing_amount=None,
            customer_facing_currency=None,
            available_on="2024-01-01 10:00:00",
        ),
    ]
    overview = insights.settlement_overview(transactions)

    assert overview["total_count"] == 3
    assert overview["payment_count"] == 2
    assert overview["total_volume"] == pytest.approx(4000.0)
    assert overview["payment_share"] == pytest.approx(200 / 3)
    assert overview["average_ticket_size"] == pytest.approx(2000.0)
    assert overview["largest_transaction"] == pytest.approx(3000.0)
    assert overview["avg_rate"] == pytest.approx(12.5)
    assert overview["volume_weighted_rate"] == pytest.approx(4000 / 300)
    assert overview["rate_spread"] == pytest.approx(40.0)
    assert overview["month_over_month"] is None
    assert [band["count"] for band in overview["processing_bands"]] == [2, 0, 0]
    assert [band["count"] for band in overview["amount_ranges"]] == [2, 0, 0]
    assert [band["count"] for band in overview["ticket_bands"]] == [0, 1, 1]
    assert [band["share"] for band in overview["ticket_bands"]] == [0.0, 50.0, 50.0]


def test_transaction_summary_growth(make_txn) -> None:
    summary = insights.transaction_summary(
        [
            make_txn(id="a", created="2024-01-10 10:00:00", customer_facing_amount=100.0),
            make_txn(id="b", created="2024-02-10 10:00:00", customer_facing_amount=150.0),
            make_txn(id="c", created="2024-02-11 10:00:00", customer_facing_amount=None),
        ]
    )

    assert summary["total_count"] == 3
    assert summary["total_volume"] == pytest.approx(250.0)
    assert summary["volume_growth"] == pytest.approx(50.0)
    assert summary["count_growth"] == pytest.approx(100.0)
    assert [entry["label"] for entry in summary["recent_months"]] == ["Jan 2024", "Feb 2024"]


def test_build_dashboard_returns_every_panel(make_txn) -> None:
    payload = insights.build_dashboard([make_txn()])
    assert set(payload) == {
        "summary",
        "overview",
        "daily",
        "hourly",
        "weekday",
        "monthly",
        "currency",
        "exchange_rates",
        "value_segments",
        "processing",
        "processing_trend",
    }


def test_build_dashboard_on_empty_input() -> None:
    payload = insights.build_dashboard([])

    assert payload["summary"]["total_count"] == 0
    assert payload["summary"]["avg_transaction_size"] is None
    assert payload["daily"]["days"] == []
    assert len(payload["weekday"]["days"]) == 7
    assert payload["exchange_rates"]["volume_weighted_rate"] is None
    assert payload["processing"]["fast_share"] is None
