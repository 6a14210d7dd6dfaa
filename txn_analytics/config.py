"""Runtime configuration for the dashboard."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class DashboardConfig:
    data_path: Path | None = None
    strict_ingestion: bool = False
    rate_currency: str = "usd"
    moving_average_window: int = 5
    settlement_currency: str = "NGN"
    customer_currency: str = "USD"


DEFAULT_CONFIG = DashboardConfig()


def _read_int(environ: Mapping[str, str], key: str, default: int) -> int:
    raw = environ.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from exc
    if value < 1:
        raise ValueError(f"{key} must be positive, got {value}")
    return value


def load_config(environ: Mapping[str, str] | None = None) -> DashboardConfig:
    """Build a :class:`DashboardConfig` from ``TXN_ANALYTICS_*`` variables."""

    env = os.environ if environ is None else environ

    data_path_raw = (env.get("TXN_ANALYTICS_DATA_PATH") or "").strip()
    strict_raw = (env.get("TXN_ANALYTICS_STRICT_INGEST") or "").strip().lower()
    rate_currency = (env.get("TXN_ANALYTICS_RATE_CURRENCY") or "").strip().lower()

    return DashboardConfig(
        data_path=Path(data_path_raw) if data_path_raw else None,
        strict_ingestion=strict_raw in _TRUTHY,
        rate_currency=rate_currency or DEFAULT_CONFIG.rate_currency,
        moving_average_window=_read_int(
            env, "TXN_ANALYTICS_MA_WINDOW", DEFAULT_CONFIG.moving_average_window
        ),
    )
