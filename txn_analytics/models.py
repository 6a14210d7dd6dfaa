"""Record model for balance-transaction exports."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Literal

TransactionType = Literal["payment", "payout"]

# Positional column order of the export. The two fee-breakdown columns are
# carried in the file but not mapped onto the record.
CSV_HEADER = (
    "id",
    "Type",
    "Source",
    "Amount",
    "Fee",
    "Destination Platform Fee",
    "Application Fee",
    "Net",
    "Currency",
    "Created (UTC)",
    "Available On (UTC)",
    "Description",
    "Customer Facing Amount",
    "Customer Facing Currency",
    "Transfer",
    "Transfer Date (UTC)",
)
EXPECTED_FIELD_COUNT = len(CSV_HEADER)
SKIPPED_COLUMNS = (5, 6)


@dataclass(frozen=True)
class Transaction:
    """A single row of the balance export."""

    id: str
    type: TransactionType | str
    source: str
    amount: float
    fee: float
    net: float
    currency: str
    created: str
    available_on: str
    description: str
    customer_facing_amount: float | None
    customer_facing_currency: str | None
    transfer: str
    transfer_date: str


FIELD_NAMES = tuple(field.name for field in fields(Transaction))
NUMERIC_FIELDS = ("amount", "fee", "net", "customer_facing_amount")
