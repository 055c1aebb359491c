#!/usr/bin/env python3
"""Clear all ledger data from the configured database."""
import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from sqlalchemy import delete, func, inspect, select  # noqa: E402

from salary_ledger.core.config import get_settings  # noqa: E402
from salary_ledger.core.logger import get_logger, init_logging  # noqa: E402
from salary_ledger.db import drop_schema, get_default_engine, session_scope  # noqa: E402
from salary_ledger.models import Base  # noqa: E402

logger = get_logger(__name__)


def row_counts() -> dict[str, int]:
    """Return the row count of every existing ledger table."""

    existing = set(inspect(get_default_engine()).get_table_names())
    counts: dict[str, int] = {}
    with session_scope() as session:
        for table in Base.metadata.sorted_tables:
            if table.name in existing:
                counts[table.name] = session.execute(select(func.count()).select_from(table)).scalar_one()
    return counts


def clear_database() -> None:
    """Delete all rows, child tables first."""

    counts = row_counts()
    if not any(counts.values()):
        logger.info("Database is empty, skipping clear operation")
        return

    with session_scope() as session:
        for table in reversed(Base.metadata.sorted_tables):
            if table.name in counts:
                session.execute(delete(table))
                logger.info(f"Cleared {counts[table.name]} rows from {table.name}")


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--drop", action="store_true", help="Drop the tables instead of emptying them")
    args = parser.parse_args()

    init_logging(get_settings().logging)
    if args.drop:
        drop_schema(get_default_engine())
        logger.info("Dropped all ledger tables")
        return
    clear_database()


if __name__ == "__main__":
    main()
