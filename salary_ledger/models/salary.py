"""ORM models for monthly salary records and their expense line items."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from .base import EntityBase, utcnow

if TYPE_CHECKING:  # pragma: no cover
    from .employees import Employee


class SalaryRecord(EntityBase):
    """Salary paid to one employee for one month.

    ``(user_id, employee_id, month, year)`` is the natural key; ``month`` is
    zero based (0 = January).
    """

    __tablename__ = "salary_records"
    __table_args__ = (
        UniqueConstraint("user_id", "employee_id", "month", "year", name="uq_salary_record_period"),
        CheckConstraint("month BETWEEN 0 AND 11", name="ck_salary_record_month"),
        CheckConstraint("salary >= 0", name="ck_salary_record_salary"),
        Index("ix_salary_records_user_period", "user_id", "year", "month"),
    )

    user_id: Mapped[str] = mapped_column(String(32), nullable=False)
    employee_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("employees.id", ondelete="CASCADE"), nullable=False
    )
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    salary: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    employee: Mapped["Employee"] = relationship(back_populates="salary_records")
    expenses: Mapped[list["Expense"]] = relationship(
        back_populates="salary_record",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Expense(EntityBase):
    """Ad-hoc expense attached to a salary record.

    The expense date (``expense_day``/``expense_month``/``expense_year``) is
    independent of the parent record's period.
    """

    __tablename__ = "expenses"
    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_expense_amount"),
        CheckConstraint("expense_month BETWEEN 0 AND 11", name="ck_expense_month"),
        CheckConstraint("expense_day BETWEEN 1 AND 31", name="ck_expense_day"),
        Index("ix_expenses_user_record", "user_id", "salary_record_id"),
    )

    user_id: Mapped[str] = mapped_column(String(32), nullable=False)
    salary_record_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("salary_records.id", ondelete="CASCADE"), nullable=False
    )
    category: Mapped[str] = mapped_column(String(120), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    expense_day: Mapped[int] = mapped_column(Integer, nullable=False)
    expense_month: Mapped[int] = mapped_column(Integer, nullable=False)
    expense_year: Mapped[int] = mapped_column(Integer, nullable=False)

    salary_record: Mapped["SalaryRecord"] = relationship(back_populates="expenses")
