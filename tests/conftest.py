from __future__ import annotations

from collections.abc import Callable

import pytest

from txn_analytics.models import CSV_HEADER, Transaction

_DEFAULTS = {
    "id": "txn_1",
    "type": "payment",
    "source": "ch_1",
    "amount": 1000.0,
    "fee": 10.0,
    "net": 990.0,
    "currency": "ngn",
    "created": "2024-01-01 10:00:00",
    "available_on": "2024-01-01 10:10:00",
    "description": "Order",
    "customer_facing_amount": 100.0,
    "customer_facing_currency": "usd",
    "transfer": "",
    "transfer_date": "",
}


@pytest.fixture
def make_txn() -> Callable[..., Transaction]:
    def _make(**overrides: object) -> Transaction:
        return Transaction(**{**_DEFAULTS, **overrides})

    return _make


@pytest.fixture
def csv_row() -> Callable[..., list[str]]:
    def _row(
        txn_id: str = "txn_1",
        *,
        amount: str = "1000.00",
        created: str = "2024-01-01 10:00:00",
        available_on: str = "2024-01-01 10:10:00",
        customer_amount: str = "100.00",
        customer_currency: str = "usd",
    ) -> list[str]:
        return [
            txn_id,
            "payment",
            "ch_1",
            amount,
            "10.00",
            "",
            "",
            "990.00",
            "ngn",
            created,
            available_on,
            "Order",
            customer_amount,
            customer_currency,
            "",
            "",
        ]

    return _row


@pytest.fixture
def export_text() -> Callable[..., str]:
    """Build positional export text from rows of cells."""

    def _build(*rows: list[str], header: tuple[str, ...] = CSV_HEADER) -> str:
        lines = [",".join(header)]
        lines.extend(",".join(row) for row in rows)
        return "\n".join(lines) + "\n"

    return _build
