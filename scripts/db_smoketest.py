"""Simple database connectivity check."""
from __future__ import annotations

import sys
from pathlib import Path

from sqlalchemy import inspect, text

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from salary_ledger.core.config import get_settings  # noqa: E402  (import after sys.path manipulation)
from salary_ledger.db.engine import create_sync_engine  # noqa: E402
from salary_ledger.models import Base  # noqa: E402

settings = get_settings()
engine = create_sync_engine()


def main() -> int:
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
        print(
            "✅ Connected to {url} via {driver}".format(
                url=settings.database.masked_url,
                driver=engine.dialect.driver,
            )
        )

    existing = set(inspect(engine).get_table_names())
    missing = sorted(set(Base.metadata.tables) - existing)
    if missing:
        print("⚠️  Missing tables: {tables} (run `salary-ledger init-db`)".format(tables=", ".join(missing)))
        return 1
    print("Schema OK: {tables}".format(tables=", ".join(sorted(Base.metadata.tables))))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
