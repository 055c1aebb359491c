"""Schema creation for fresh databases (no migrations are maintained)."""
from __future__ import annotations

from sqlalchemy.engine import Engine

from salary_ledger.core.logger import get_logger
from salary_ledger.models import Base

LOGGER = get_logger(__name__)


def create_schema(engine: Engine) -> None:
    """Create every ledger table that does not exist yet."""

    Base.metadata.create_all(engine)
    LOGGER.info("Database schema ensured (%s tables)", len(Base.metadata.tables))


def drop_schema(engine: Engine) -> None:
    Base.metadata.drop_all(engine)
    LOGGER.warning("Database schema dropped")
