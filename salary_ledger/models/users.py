"""ORM model for registered users."""
from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from .base import EntityBase


class User(EntityBase):
    """Identity root; every other row is scoped by ``user_id``.

    ``email`` is stored and compared exactly as entered (no case folding).
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
