"""Shared helpers for ledger repositories."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from salary_ledger.core.errors import StoreError


class BaseRepository:
    """Base repository holding the session every query runs on."""

    def __init__(self, session: Session) -> None:
        self._session = session


@contextmanager
def translate_store_errors() -> Iterator[None]:
    """Re-raise SQLAlchemy failures as ``StoreError`` with the driver message."""

    try:
        yield
    except SQLAlchemyError as exc:
        original = getattr(exc, "orig", None)
        raise StoreError(str(original or exc)) from exc
