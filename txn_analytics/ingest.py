"""CSV ingestion for balance-transaction exports.

The export is positional: the first line is a header and every following line
maps onto :class:`~txn_analytics.models.Transaction` by column index, see
:data:`~txn_analytics.models.CSV_HEADER`.

By default rows are never rejected. Unparseable or non-finite numbers become
``NaN`` and short lines leave their trailing fields empty. ``strict=True``
checks the header and the column count of every line first and raises
:class:`IngestionError` on the first mismatch. Text that has no header, or
whose header is not comma-delimited, is rejected in both modes.
"""

from __future__ import annotations

import csv
import math
from collections.abc import Iterable, Sequence
from os import PathLike
from pathlib import Path

import pandas as pd

from .logging_setup import get_logger
from .models import CSV_HEADER, EXPECTED_FIELD_COUNT, FIELD_NAMES, NUMERIC_FIELDS, SKIPPED_COLUMNS, Transaction
from .utils import ensure_dataframe

logger = get_logger(__name__)


class IngestionError(ValueError):
    """Raised when the export cannot be read as a positional CSV."""

    def __init__(self, message: str, *, line: int | None = None) -> None:
        self.line = line
        super().__init__(f"line {line}: {message}" if line is not None else message)


def _split(line: str) -> list[str]:
    return next(csv.reader([line]))


def _to_float(value: str | None) -> float:
    if value is None:
        return math.nan
    try:
        parsed = float(value)
    except ValueError:
        return math.nan
    # float() accepts "inf" and "nan"; neither is an amount.
    return parsed if math.isfinite(parsed) else math.nan


def _optional_float(value: str | None) -> float | None:
    if value is None or value.strip() == "":
        return None
    return _to_float(value)


def _optional_text(value: str | None) -> str | None:
    return value if value else None


def _text(value: str | None) -> str:
    return value if value is not None else ""


def _check_header(header: str) -> None:
    found = [cell.strip().lower() for cell in _split(header)]
    expected = [name.lower() for name in CSV_HEADER]
    if found != expected:
        raise IngestionError(
            f"unexpected header; expected {len(expected)} columns "
            f"({', '.join(CSV_HEADER)}), got {len(found)}",
            line=1,
        )


def _row_to_transaction(cells: Sequence[str | None]) -> Transaction:
    padded = list(cells[:EXPECTED_FIELD_COUNT])
    padded.extend([None] * (EXPECTED_FIELD_COUNT - len(padded)))
    (
        txn_id,
        txn_type,
        source,
        amount,
        fee,
        _destination_fee,
        _application_fee,
        net,
        currency,
        created,
        available_on,
        description,
        customer_amount,
        customer_currency,
        transfer,
        transfer_date,
    ) = padded

    return Transaction(
        id=_text(txn_id),
        type=_text(txn_type),
        source=_text(source),
        amount=_to_float(amount),
        fee=_to_float(fee),
        net=_to_float(net),
        currency=_text(currency),
        created=_text(created),
        available_on=_text(available_on),
        description=_text(description),
        customer_facing_amount=_optional_float(customer_amount),
        customer_facing_currency=_optional_text(customer_currency),
        transfer=_text(transfer),
        transfer_date=_text(transfer_date),
    )


def parse_transactions(raw_text: str, *, strict: bool = False) -> list[Transaction]:
    """Map export text onto transactions in file order.

    The header line is always discarded. Blank lines are skipped.
    """

    if raw_text is None or not raw_text.strip():
        raise IngestionError("export is empty; expected a header row")

    lines = raw_text.strip().splitlines()
    header, body = lines[0], lines[1:]
    if "," not in header:
        raise IngestionError("header row is not comma-delimited", line=1)
    if strict:
        _check_header(header)

    transactions: list[Transaction] = []
    skipped = 0
    for line_no, line in enumerate(body, start=2):
        if not line.strip():
            skipped += 1
            continue
        cells = _split(line)
        if strict and len(cells) != EXPECTED_FIELD_COUNT:
            logger.warning("Rejecting export: line %d has %d fields", line_no, len(cells))
            raise IngestionError(
                f"expected {EXPECTED_FIELD_COUNT} fields, got {len(cells)}",
                line=line_no,
            )
        transactions.append(_row_to_transaction(cells))

    if skipped:
        logger.debug("Skipped %d blank line(s)", skipped)
    logger.debug("Parsed %d transaction(s)", len(transactions))
    return transactions


def read_export_text(path: str | PathLike[str]) -> str:
    """Return the text of an export file, raising :class:`IngestionError` when unreadable."""

    p = Path(path)
    try:
        return p.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not read export %s: %s", p, exc)
        raise IngestionError(f"cannot read {p}: {exc}") from exc


def load_transactions(path: str | PathLike[str], *, strict: bool = False) -> list[Transaction]:
    """Read an export from disk and parse it."""

    transactions = parse_transactions(read_export_text(path), strict=strict)
    logger.info("Loaded %d transaction(s) from %s", len(transactions), path)
    return transactions


def to_csv_text(transactions: Iterable[Transaction] | pd.DataFrame) -> str:
    """Serialise transactions back into the positional export format.

    Accepts records or a frame carrying the raw transaction columns, such as
    the windowed output of :func:`~txn_analytics.features.filter_window`.
    Derived columns are dropped and the two unmapped fee columns are written
    blank.
    """

    df = ensure_dataframe(transactions)
    for column in NUMERIC_FIELDS:
        df[column] = pd.to_numeric(df[column], errors="coerce").astype(float)

    export = pd.DataFrame(index=df.index)
    fields = iter(FIELD_NAMES)
    for position, name in enumerate(CSV_HEADER):
        export[name] = "" if position in SKIPPED_COLUMNS else df[next(fields)]
    return export.to_csv(index=False, lineterminator="\n", float_format="%.2f")
