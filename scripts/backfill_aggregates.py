"""Backfill daily aggregates for the trailing N days."""

from __future__ import annotations

import logging
import os
import sys

from mediahub.jobs.daily import run_backfill


def main() -> None:
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
    days = int(sys.argv[1]) if len(sys.argv) > 1 else None
    result = run_backfill(days)
    print(
        f"Backfill {'succeeded' if result.success else 'finished with errors'}: "
        f"{result.aggregates_created} created, {result.aggregates_updated} updated"
    )
    if not result.success:
        for error in result.errors:
            print(error, file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
