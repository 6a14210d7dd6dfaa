"""Synthetic balance-export generation.

The generator produces deterministic payment and payout rows that look like a
processor balance export: payments settle in NGN, customers are charged mostly
in USD, and the rows carry skewed availability latencies, a business-hours
arrival pattern, and weekly payouts.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path

import numpy as np

from .ingest import to_csv_text
from .logging_setup import get_logger
from .models import Transaction

logger = get_logger(__name__)

DEFAULT_ROWS = 600
DEFAULT_SEED = 7
HORIZON_DAYS = 120
START = datetime(2024, 1, 1)
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

SETTLEMENT_CURRENCY = "ngn"
BASE_NGN_PER_USD = 1450.0
FEE_RATE = 0.039
FEE_FIXED = 100.0
MISSING_CUSTOMER_AMOUNT_RATE = 0.05
DELAYED_AVAILABILITY_RATE = 0.03

# Relative arrival weight for each hour of the day (UTC).
HOUR_WEIGHTS = np.array(
    [1, 1, 1, 1, 1, 2, 3, 5, 8, 10, 11, 11, 10, 10, 11, 10, 9, 8, 7, 6, 5, 4, 2, 1],
    dtype=float,
)


@dataclass(frozen=True)
class CurrencyProfile:
    """Customer-facing currency and its share of payments."""

    code: str
    weight: float
    usd_per_unit: float


CUSTOMER_CURRENCIES = (
    CurrencyProfile("usd", 0.78, 1.0),
    CurrencyProfile("gbp", 0.14, 1.27),
    CurrencyProfile("eur", 0.08, 1.08),
)


def _hex_id(prefix: str, rng: np.random.Generator) -> str:
    return f"{prefix}_{rng.bytes(12).hex()}"


def _daily_rates(rng: np.random.Generator, days: int) -> np.ndarray:
    """NGN per USD as a multiplicative random walk."""

    steps = rng.normal(0.0, 0.006, size=days)
    return BASE_NGN_PER_USD * np.exp(np.cumsum(steps))


def _latency(rng: np.random.Generator) -> timedelta:
    if rng.random() < DELAYED_AVAILABILITY_RATE:
        return timedelta(days=int(rng.integers(1, 4)), minutes=int(rng.integers(0, 600)))
    minutes = float(rng.lognormal(mean=2.6, sigma=1.0))
    return timedelta(seconds=round(minutes * 60))


def _payment(
    created: datetime,
    rate: float,
    rng: np.random.Generator,
    order: int,
) -> Transaction:
    probabilities = np.array([profile.weight for profile in CUSTOMER_CURRENCIES])
    profile = CUSTOMER_CURRENCIES[int(rng.choice(len(CUSTOMER_CURRENCIES), p=probabilities / probabilities.sum()))]

    charged = round(max(1.0, float(rng.lognormal(mean=4.6, sigma=1.2))), 2)
    amount = round(charged * profile.usd_per_unit * rate, 2)
    fee = round(amount * FEE_RATE + FEE_FIXED, 2)

    customer_amount: float | None = charged
    customer_currency: str | None = profile.code
    if rng.random() < MISSING_CUSTOMER_AMOUNT_RATE:
        customer_amount = None
        customer_currency = None

    return Transaction(
        id=_hex_id("txn", rng),
        type="payment",
        source=_hex_id("ch", rng),
        amount=amount,
        fee=fee,
        net=round(amount - fee, 2),
        currency=SETTLEMENT_CURRENCY,
        created=created.strftime(TIMESTAMP_FORMAT),
        available_on=(created + _latency(rng)).strftime(TIMESTAMP_FORMAT),
        description=f"Payment for order #{order:05d}",
        customer_facing_amount=customer_amount,
        customer_facing_currency=customer_currency,
        transfer="",
        transfer_date="",
    )


def _payout(created: datetime, amount: float, rng: np.random.Generator) -> Transaction:
    stamp = created.strftime(TIMESTAMP_FORMAT)
    return Transaction(
        id=_hex_id("txn", rng),
        type="payout",
        source=_hex_id("po", rng),
        amount=-amount,
        fee=0.0,
        net=-amount,
        currency=SETTLEMENT_CURRENCY,
        created=stamp,
        available_on=stamp,
        description="STRIPE PAYOUT",
        customer_facing_amount=None,
        customer_facing_currency=None,
        transfer="",
        transfer_date="",
    )


def generate_transactions(
    rows: int = DEFAULT_ROWS,
    *,
    seed: int | None = DEFAULT_SEED,
) -> list[Transaction]:
    """Generate ``rows`` deterministic transactions ordered by ``created``."""

    if rows <= 0:
        raise ValueError("rows must be positive")

    rng = np.random.default_rng(seed)
    rates = _daily_rates(rng, HORIZON_DAYS)
    hour_probabilities = HOUR_WEIGHTS / HOUR_WEIGHTS.sum()

    payout_count = min(HORIZON_DAYS // 7, rows // 10)
    payment_count = rows - payout_count

    payments: list[Transaction] = []
    for order in range(payment_count):
        day = int(rng.integers(0, HORIZON_DAYS))
        hour = int(rng.choice(24, p=hour_probabilities))
        created = START + timedelta(
            days=day,
            hours=hour,
            minutes=int(rng.integers(0, 60)),
            seconds=int(rng.integers(0, 60)),
        )
        payments.append(_payment(created, float(rates[day]), rng, order + 1))

    payouts: list[Transaction] = []
    weekly_net = sum(txn.net for txn in payments) / max(payout_count, 1)
    for week in range(payout_count):
        created = START + timedelta(days=7 * (week + 1), hours=9)
        amount = round(weekly_net * float(rng.uniform(0.8, 1.2)), 2)
        payouts.append(_payout(created, amount, rng))

    transactions = sorted(payments + payouts, key=lambda txn: (txn.created, txn.id))
    logger.debug(
        "Generated %d payment(s) and %d payout(s) with seed %s",
        payment_count,
        payout_count,
        seed,
    )
    return transactions


def write_sample_csv(
    path: str | Path = Path("data") / "sample_transactions.csv",
    rows: int = DEFAULT_ROWS,
    seed: int | None = DEFAULT_SEED,
) -> Path:
    """Persist a synthetic export in the positional CSV format."""

    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(to_csv_text(generate_transactions(rows, seed=seed)), encoding="utf-8")
    logger.info("Wrote %d synthetic transaction(s) to %s", rows, output)
    return output


def main() -> None:  # pragma: no cover - convenience CLI
    path = write_sample_csv()
    print(f"Wrote {path}")


if __name__ == "__main__":  # pragma: no cover - module CLI
    main()
