"""Database helpers and SQLAlchemy session factories."""

from .engine import create_sync_engine
from .schema import create_schema, drop_schema
from .session import (
    get_default_engine,
    get_default_sessionmaker,
    session_scope,
    unit_of_work,
)

__all__ = [
    "create_schema",
    "create_sync_engine",
    "drop_schema",
    "get_default_engine",
    "get_default_sessionmaker",
    "session_scope",
    "unit_of_work",
]
