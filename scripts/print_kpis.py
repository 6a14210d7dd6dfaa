"""Utility script to print the dashboard payload for a CSV export or synthetic data."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any

from txn_analytics import ingest, insights, synth
from txn_analytics.config import load_config
from txn_analytics.logging_setup import configure_logging


def _default_serializer(obj: Any) -> Any:
    if isinstance(obj, Path):
        return str(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serialisable")


def main() -> None:
    parser = argparse.ArgumentParser(description="Print the dashboard payload as JSON")
    parser.add_argument("csv", nargs="?", type=Path, help="Balance export to analyse (defaults to synthetic data)")
    parser.add_argument("--strict", action="store_true", help="Reject files that do not match the export schema")
    parser.add_argument("--rows", type=int, default=synth.DEFAULT_ROWS)
    parser.add_argument("--seed", type=int, default=synth.DEFAULT_SEED)
    args = parser.parse_args()

    configure_logging()
    config = load_config()

    source = args.csv or config.data_path
    if source is not None:
        transactions = ingest.load_transactions(source, strict=args.strict or config.strict_ingestion)
    else:
        transactions = synth.generate_transactions(args.rows, seed=args.seed)

    payload = insights.build_dashboard(transactions, config)
    print(json.dumps(payload, indent=2, default=_default_serializer))


if __name__ == "__main__":
    main()
