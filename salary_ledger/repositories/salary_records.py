"""Data access for salary records and their expense lines."""
from __future__ import annotations

from collections import defaultdict
from decimal import Decimal
from typing import Iterable, Sequence

from sqlalchemy import delete, select

from salary_ledger.domain import ExpenseInput
from salary_ledger.models import Expense, SalaryRecord

from .base import BaseRepository


class SalaryRecordRepository(BaseRepository):
    """Queries for the ``salary_records`` and ``expenses`` tables."""

    def find_by_period(
        self, user_id: str, employee_id: str, month: int, year: int
    ) -> SalaryRecord | None:
        return self._session.execute(
            select(SalaryRecord).where(
                SalaryRecord.user_id == user_id,
                SalaryRecord.employee_id == employee_id,
                SalaryRecord.month == month,
                SalaryRecord.year == year,
            )
        ).scalar_one_or_none()

    def insert(
        self, *, user_id: str, employee_id: str, month: int, year: int, salary: Decimal
    ) -> SalaryRecord:
        """Insert a record inside a savepoint.

        A unique-key violation rolls back only the savepoint and propagates as
        ``IntegrityError``, leaving the outer transaction usable.
        """

        record = SalaryRecord(
            user_id=user_id,
            employee_id=employee_id,
            month=month,
            year=year,
            salary=salary,
        )
        with self._session.begin_nested():
            self._session.add(record)
        return record

    def list_for_owner(self, user_id: str) -> list[SalaryRecord]:
        """Return the owner's records, most recent period first."""

        return list(
            self._session.execute(
                select(SalaryRecord)
                .where(SalaryRecord.user_id == user_id)
                .order_by(SalaryRecord.year.desc(), SalaryRecord.month.desc())
            ).scalars()
        )

    def expenses_by_record(
        self, user_id: str, record_ids: Sequence[str]
    ) -> dict[str, list[Expense]]:
        """Fetch the expenses of all ``record_ids`` in one query, keyed by parent id."""

        grouped: dict[str, list[Expense]] = defaultdict(list)
        if not record_ids:
            return grouped
        rows = self._session.execute(
            select(Expense)
            .where(Expense.user_id == user_id, Expense.salary_record_id.in_(record_ids))
            .order_by(Expense.created_at.asc())
        ).scalars()
        for expense in rows:
            grouped[expense.salary_record_id].append(expense)
        return grouped

    def delete_expenses(self, user_id: str, record_id: str) -> int:
        result = self._session.execute(
            delete(Expense)
            .where(Expense.user_id == user_id, Expense.salary_record_id == record_id)
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)

    def add_expenses(
        self, user_id: str, record_id: str, expenses: Iterable[ExpenseInput]
    ) -> list[Expense]:
        rows = [
            Expense(
                user_id=user_id,
                salary_record_id=record_id,
                category=item.category,
                amount=item.amount,
                expense_day=item.expense_day,
                expense_month=item.expense_month,
                expense_year=item.expense_year,
            )
            for item in expenses
        ]
        if rows:
            self._session.add_all(rows)
            self._session.flush()
        return rows
