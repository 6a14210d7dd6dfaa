"""Feature engineering helpers for the payments dashboard."""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np
import pandas as pd

from . import utils
from .models import NUMERIC_FIELDS, Transaction

WEEKDAYS = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)
UNKNOWN_CURRENCY = "UNKNOWN"


def parse_timestamps(values: pd.Series) -> pd.Series:
    """Parse ISO-8601 strings to naive UTC timestamps; bad values become ``NaT``."""

    text = values.astype(object).where(values.notna(), "").astype(str)
    parsed = pd.to_datetime(text, errors="coerce", utc=True, format="ISO8601")
    return parsed.dt.tz_convert(None)


def _elapsed(later: pd.Series, earlier: pd.Series, unit_seconds: int) -> pd.Series:
    seconds = (later - earlier).dt.total_seconds()
    return np.floor(seconds / unit_seconds).fillna(0).astype("int64")


def add_engineered_features(
    transactions: Iterable[Transaction] | pd.DataFrame,
) -> pd.DataFrame:
    """Add derived fields required by downstream analytics and visuals."""

    df = utils.ensure_dataframe(transactions).copy()

    for column in NUMERIC_FIELDS:
        df[column] = pd.to_numeric(df[column], errors="coerce").astype(float)

    df["created_at"] = parse_timestamps(df["created"])
    df["available_at"] = parse_timestamps(df["available_on"])

    df["has_customer_amount"] = df["customer_facing_amount"].notna() & (
        df["customer_facing_amount"] != 0
    )
    df["customer_volume"] = df["customer_facing_amount"].fillna(0).abs()
    df["settlement_volume"] = df["amount"].abs()

    df["processing_minutes"] = _elapsed(df["available_at"], df["created_at"], 60)
    df["processing_hours"] = _elapsed(df["available_at"], df["created_at"], 3600)

    df["day"] = df["created_at"].dt.normalize()
    df["hour"] = df["created_at"].dt.strftime("%H:00")
    df["weekday"] = df["created_at"].dt.day_name()
    df["month"] = df["created_at"].dt.to_period("M").dt.to_timestamp()

    currency = df["customer_facing_currency"].fillna("").astype(str).str.upper()
    df["currency_key"] = currency.where(currency != "", UNKNOWN_CURRENCY)

    return df


def ensure_features(transactions: Iterable[Transaction] | pd.DataFrame) -> pd.DataFrame:
    """Return an engineered frame, deriving the columns only when missing."""

    if isinstance(transactions, pd.DataFrame) and "created_at" in transactions:
        return transactions.copy()
    return add_engineered_features(transactions)


def filter_window(frame: pd.DataFrame, days: int | None) -> pd.DataFrame:
    """Keep rows created within ``days`` of the latest ``created_at``."""

    if days is None or frame.empty:
        return frame.copy()
    latest = frame["created_at"].max()
    if pd.isna(latest):
        return frame.copy()
    start = latest - pd.Timedelta(days=days)
    return frame.loc[frame["created_at"] > start].copy()
