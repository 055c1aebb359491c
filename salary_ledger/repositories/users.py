"""Data access for registered users."""
from __future__ import annotations

from sqlalchemy import select

from salary_ledger.models import User

from .base import BaseRepository


class UserRepository(BaseRepository):
    """Queries against the ``users`` table."""

    def get_by_email(self, email: str) -> User | None:
        return self._session.execute(
            select(User).where(User.email == email)
        ).scalar_one_or_none()

    def add(self, *, name: str, email: str, password: str) -> User:
        """Stage a new user and flush so the unique constraint is checked now."""

        user = User(name=name, email=email, password=password)
        self._session.add(user)
        self._session.flush()
        return user
