"""Regenerate the synthetic balance export used for demos.

Output: data/sample_transactions.csv in the positional export format, which the
dashboard and ``scripts/print_kpis.py`` both read.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from txn_analytics import synth
from txn_analytics.logging_setup import configure_logging


def main() -> None:
    parser = argparse.ArgumentParser(description="Regenerate the synthetic balance export CSV")
    parser.add_argument("--rows", type=int, default=synth.DEFAULT_ROWS)
    parser.add_argument("--seed", type=int, default=synth.DEFAULT_SEED)
    parser.add_argument("--output", type=Path, default=Path("data") / "sample_transactions.csv")
    args = parser.parse_args()

    configure_logging()
    path = synth.write_sample_csv(args.output, rows=args.rows, seed=args.seed)
    print(f"Wrote {path} with {args.rows} rows")


if __name__ == "__main__":
    main()
