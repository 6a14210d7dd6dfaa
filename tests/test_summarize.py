from __future__ import annotations

from txn_analytics import insights, summarize, synth


def test_headline_summary_mentions_totals() -> None:
    payload = insights.build_dashboard(synth.generate_transactions(300, seed=5))
    summary = summarize.headline_summary(payload)

    assert summary.startswith("Highlights")
    assert f"{payload['summary']['total_count']:,} transactions" in summary
    assert "₦" in summary
    assert "nan" not in summary.lower()


def test_headline_summary_without_transactions() -> None:
    payload = insights.build_dashboard([])
    assert "No transactions" in summarize.headline_summary(payload)


def test_section_insights_cover_every_section() -> None:
    payload = insights.build_dashboard(synth.generate_transactions(300, seed=5))
    bullets = summarize.section_insights(payload)

    assert set(bullets) == {
        "monthly",
        "velocity",
        "processing",
        "segments",
        "currency",
        "weekday",
        "exchange_rates",
        "daily",
    }
    assert any("USD" in line for line in bullets["currency"])
    assert any("busiest day" in line for line in bullets["weekday"])
    assert bullets["exchange_rates"]
    for lines in bullets.values():
        assert all("None" not in line and "nan" not in line for line in lines)


def test_section_insights_skip_undefined_metrics(make_txn) -> None:
    payload = insights.build_dashboard([make_txn()])
    bullets = summarize.section_insights(payload)

    assert bullets["monthly"] == ["The strongest month processed $100."]
    assert bullets["exchange_rates"] == [
        "The exchange rate shows 0.0% volatility over the period.",
        "The latest rate is unchanged on the previous observation.",
    ]
