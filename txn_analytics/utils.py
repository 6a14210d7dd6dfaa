"""Shared utilities for the payments analytics dashboard."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import asdict, is_dataclass

import pandas as pd

from .models import FIELD_NAMES, Transaction

CURRENCY_SYMBOLS = {
    "USD": "$",
    "NGN": "₦",
    "GBP": "£",
    "EUR": "€",
}
NO_DATA = "—"


def ensure_dataframe(
    transactions: Iterable[Transaction] | Iterable[Mapping] | pd.DataFrame,
) -> pd.DataFrame:
    """Ensure the input payload is normalised to a :class:`pandas.DataFrame`."""

    if isinstance(transactions, pd.DataFrame):
        return transactions.copy()

    rows = [asdict(item) if is_dataclass(item) else dict(item) for item in transactions]
    if not rows:
        return pd.DataFrame(columns=list(FIELD_NAMES))
    return pd.DataFrame(rows)


def is_missing(value: float | None) -> bool:
    if value is None:
        return True
    try:
        return not math.isfinite(float(value))
    except (TypeError, ValueError):
        return True


def currency_symbol(code: str | None) -> str:
    if not code:
        return ""
    upper = code.upper()
    return CURRENCY_SYMBOLS.get(upper, f"{upper} ")


def format_currency(value: float | None, currency: str = "$", *, decimals: int = 2) -> str:
    """Return a human-readable currency string, or a dash when there is no data."""

    if is_missing(value):
        return NO_DATA
    sign = "-" if value < 0 else ""
    return f"{sign}{currency}{abs(value):,.{decimals}f}"


def format_percent(value: float | None, *, decimals: int = 1, signed: bool = False) -> str:
    if is_missing(value):
        return NO_DATA
    return f"{value:+.{decimals}f}%" if signed else f"{value:.{decimals}f}%"


def format_number(value: float | None, *, decimals: int = 0) -> str:
    if is_missing(value):
        return NO_DATA
    return f"{value:,.{decimals}f}"


def format_minutes(value: float | None, *, decimals: int = 1) -> str:
    if is_missing(value):
        return NO_DATA
    return f"{value:.{decimals}f} min"
