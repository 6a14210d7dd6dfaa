from __future__ import annotations

import pytest

from txn_analytics import stats


def test_median_upper_takes_upper_middle_for_even_lengths() -> None:
    assert stats.median_upper([40, 10, 30, 20]) == 30
    assert stats.median_upper([3, 1, 2]) == 2
    assert stats.median_upper([]) is None


def test_population_std_uses_zero_degrees_of_freedom() -> None:
    assert stats.population_std([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.0)
    assert stats.population_std([5]) == 0.0
    assert stats.population_std([]) is None


def test_ratios_are_none_when_undefined() -> None:
    assert stats.growth_rate(110, 100) == pytest.approx(10.0)
    assert stats.growth_rate(50, 100) == pytest.approx(-50.0)
    assert stats.growth_rate(10, 0) is None
    assert stats.growth_rate(10, None) is None
    assert stats.percentage(1, 4) == pytest.approx(25.0)
    assert stats.percentage(1, 0) is None
    assert stats.ratio(9, 3) == pytest.approx(3.0)
    assert stats.ratio(9, 0) is None


def test_weighted_mean_weights_by_volume() -> None:
    assert stats.weighted_mean([2.0, 3.0], [50.0, 100.0]) == pytest.approx(8 / 3)
    assert stats.weighted_mean([2.0], [0.0]) is None
    assert stats.weighted_mean([], []) is None


def test_moving_average_waits_for_full_window() -> None:
    assert stats.moving_average([1.0, 2.0, 3.0, 4.0], 2) == [None, 1.5, 2.5, 3.5]
    assert stats.moving_average([1.0, 2.0], 5) == [None, None]
    with pytest.raises(ValueError):
        stats.moving_average([1.0], 0)


def test_describe_reports_volatility_as_percentage_of_mean() -> None:
    summary = stats.describe([1.0, 3.0])
    assert summary["count"] == 2
    assert summary["mean"] == pytest.approx(2.0)
    assert summary["median"] == pytest.approx(3.0)
    assert summary["std_dev"] == pytest.approx(1.0)
    assert summary["min"] == 1.0
    assert summary["max"] == 3.0
    assert summary["volatility"] == pytest.approx(50.0)

    empty = stats.describe([])
    assert empty["count"] == 0
    assert all(empty[key] is None for key in ("mean", "median", "std_dev", "min", "max", "volatility"))
