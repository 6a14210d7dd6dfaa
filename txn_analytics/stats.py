"""Scalar statistics shared by the aggregation routines.

Every helper returns ``None`` instead of ``NaN``/``inf`` when the result is
undefined (empty input or a zero denominator).
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TypedDict

import numpy as np


class SeriesStats(TypedDict):
    count: int
    mean: float | None
    median: float | None
    std_dev: float | None
    min: float | None
    max: float | None
    volatility: float | None


def _finite(value: float) -> float | None:
    value = float(value)
    return value if np.isfinite(value) else None


def _as_array(values: Iterable[float]) -> np.ndarray:
    return np.asarray(list(values), dtype=float)


def mean(values: Iterable[float]) -> float | None:
    arr = _as_array(values)
    if arr.size == 0:
        return None
    return _finite(arr.mean())


def median_upper(values: Iterable[float]) -> float | None:
    """Middle element after sorting; the upper one for even lengths."""

    arr = np.sort(_as_array(values))
    if arr.size == 0:
        return None
    return _finite(arr[arr.size // 2])


def population_std(values: Iterable[float]) -> float | None:
    arr = _as_array(values)
    if arr.size == 0:
        return None
    return _finite(arr.std(ddof=0))


def growth_rate(current: float | None, previous: float | None) -> float | None:
    """Percentage change from ``previous`` to ``current``."""

    if current is None or previous is None or previous == 0:
        return None
    return _finite((current - previous) / previous * 100.0)


def percentage(part: float | None, whole: float | None) -> float | None:
    if part is None or whole is None or whole == 0:
        return None
    return _finite(part / whole * 100.0)


def ratio(numerator: float | None, denominator: float | None) -> float | None:
    if numerator is None or denominator is None or denominator == 0:
        return None
    return _finite(numerator / denominator)


def weighted_mean(values: Iterable[float], weights: Iterable[float]) -> float | None:
    vals = _as_array(values)
    wts = _as_array(weights)
    total_weight = wts.sum()
    if vals.size == 0 or total_weight == 0:
        return None
    return _finite((vals * wts).sum() / total_weight)


def moving_average(values: Sequence[float], window: int) -> list[float | None]:
    """Trailing mean over ``window`` points; ``None`` until the window fills."""

    if window < 1:
        raise ValueError("window must be positive")
    averages: list[float | None] = []
    for index in range(len(values)):
        if index < window - 1:
            averages.append(None)
            continue
        averages.append(mean(values[index - window + 1 : index + 1]))
    return averages


def describe(values: Iterable[float]) -> SeriesStats:
    arr = _as_array(values)
    if arr.size == 0:
        return {
            "count": 0,
            "mean": None,
            "median": None,
            "std_dev": None,
            "min": None,
            "max": None,
            "volatility": None,
        }

    avg = mean(arr)
    std = population_std(arr)
    return {
        "count": int(arr.size),
        "mean": avg,
        "median": median_upper(arr),
        "std_dev": std,
        "min": _finite(arr.min()),
        "max": _finite(arr.max()),
        "volatility": percentage(std, avg),
    }
