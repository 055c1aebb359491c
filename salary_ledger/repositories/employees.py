"""Data access for employees, always filtered by owner."""
from __future__ import annotations

from sqlalchemy import delete, select

from salary_ledger.models import Employee, Expense, SalaryRecord

from .base import BaseRepository


class EmployeeRepository(BaseRepository):
    def list_for_owner(self, user_id: str) -> list[Employee]:
        return list(
            self._session.execute(
                select(Employee)
                .where(Employee.user_id == user_id)
                .order_by(Employee.created_at.asc())
            ).scalars()
        )

    def get_for_owner(self, user_id: str, employee_id: str) -> Employee | None:
        return self._session.execute(
            select(Employee).where(Employee.id == employee_id, Employee.user_id == user_id)
        ).scalar_one_or_none()

    def add(self, *, user_id: str, name: str, position: str) -> Employee:
        employee = Employee(user_id=user_id, name=name, position=position)
        self._session.add(employee)
        self._session.flush()
        return employee

    def delete_with_records(self, user_id: str, employee_id: str) -> int:
        """Delete an employee together with its salary records and their expenses.

        Returns the number of salary records removed.
        """

        record_ids = select(SalaryRecord.id).where(
            SalaryRecord.user_id == user_id,
            SalaryRecord.employee_id == employee_id,
        )
        self._session.execute(
            delete(Expense)
            .where(Expense.user_id == user_id, Expense.salary_record_id.in_(record_ids))
            .execution_options(synchronize_session=False)
        )
        removed = self._session.execute(
            delete(SalaryRecord)
            .where(SalaryRecord.user_id == user_id, SalaryRecord.employee_id == employee_id)
            .execution_options(synchronize_session=False)
        ).rowcount
        self._session.execute(
            delete(Employee)
            .where(Employee.id == employee_id, Employee.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        return int(removed or 0)
