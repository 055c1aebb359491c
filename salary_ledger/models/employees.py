"""ORM model for employees managed by a user."""
from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from .base import EntityBase, utcnow

if TYPE_CHECKING:  # pragma: no cover
    from .salary import SalaryRecord


class Employee(EntityBase):
    """A person whose monthly salary the owner records."""

    __tablename__ = "employees"
    __table_args__ = (Index("ix_employees_user_created", "user_id", "created_at"),)

    # Owner id from whichever identity backend is configured; not a users.id FK.
    user_id: Mapped[str] = mapped_column(String(32), nullable=False)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    position: Mapped[str] = mapped_column(String(120), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    salary_records: Mapped[list["SalaryRecord"]] = relationship(
        back_populates="employee",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
