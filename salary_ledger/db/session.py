"""Opinionated SQLAlchemy session helpers."""
from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .engine import create_sync_engine


@lru_cache(maxsize=1)
def get_default_engine() -> Engine:
    """Return the process-wide engine for the configured database."""

    return create_sync_engine()


@lru_cache(maxsize=1)
def get_default_sessionmaker() -> sessionmaker:
    """Return the process-wide ``sessionmaker`` bound to ``get_default_engine``."""

    return sessionmaker(bind=get_default_engine(), autoflush=False, expire_on_commit=False)


@contextmanager
def session_scope(factory: sessionmaker | None = None) -> Iterator[Session]:
    """Provide a transactional scope for imperative scripts."""

    session = (factory or get_default_sessionmaker())()
    try:
        yield session
        session.commit()
    except Exception:  # pragma: no cover - re-raise for callers
        session.rollback()
        raise
    finally:
        session.close()


@contextmanager
def unit_of_work(session: Session) -> Iterator[Session]:
    """Commit ``session`` when the block succeeds, roll everything back otherwise."""

    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
