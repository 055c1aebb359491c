"""Database engine factories."""
from __future__ import annotations

from pathlib import Path

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool

from salary_ledger.core.config import get_settings
from salary_ledger.core.logger import get_logger

LOGGER = get_logger(__name__)


def _on_sqlite_connect(dbapi_connection, connection_record) -> None:
    # Transactions are begun explicitly by _on_sqlite_begin.
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _on_sqlite_begin(conn) -> None:
    conn.exec_driver_sql("BEGIN")


def create_sync_engine(url: str | None = None, **kwargs) -> Engine:
    """Create a synchronous SQLAlchemy engine using configured defaults.

    SQLite engines get foreign key enforcement and explicit BEGIN/SAVEPOINT
    handling on every connection; in-memory SQLite URLs share one connection
    through ``StaticPool`` so every session sees the same database.
    """

    settings = get_settings()
    resolved_url = url or settings.database.url

    options = dict(kwargs)
    options.setdefault("echo", settings.sqlalchemy_echo)

    parsed = make_url(resolved_url)
    is_sqlite = parsed.get_backend_name() == "sqlite"
    if is_sqlite:
        connect_args = dict(options.pop("connect_args", {}))
        connect_args.setdefault("check_same_thread", False)
        options["connect_args"] = connect_args
        if parsed.database in (None, "", ":memory:"):
            options.setdefault("poolclass", StaticPool)
        else:
            Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)

    LOGGER.debug(
        "Creating SQLAlchemy engine",
        extra={"url": parsed.render_as_string(hide_password=True), "echo": options["echo"]},
    )
    engine = create_engine(resolved_url, future=True, **options)
    if is_sqlite:
        event.listen(engine, "connect", _on_sqlite_connect)
        event.listen(engine, "begin", _on_sqlite_begin)
    return engine
