"""Owner-scoped employee management."""
from __future__ import annotations

from sqlalchemy.orm import Session

from salary_ledger.core.errors import NotFoundError
from salary_ledger.core.logger import get_logger
from salary_ledger.db.session import unit_of_work
from salary_ledger.domain import EmployeeSummary
from salary_ledger.repositories import EmployeeRepository, translate_store_errors

from .validation import validate_employee_fields

LOGGER = get_logger(__name__)


class EmployeeService:
    """Create, list, edit and delete the employees of one owner."""

    def __init__(self, session: Session) -> None:
        self._session = session
        self._employees = EmployeeRepository(session)

    def list_employees(self, user_id: str) -> list[EmployeeSummary]:
        """Return the owner's employees in creation order."""

        with translate_store_errors():
            rows = self._employees.list_for_owner(user_id)
        return [EmployeeSummary.from_row(row) for row in rows]

    def create_employee(self, user_id: str, name: str, position: str) -> EmployeeSummary:
        name, position = validate_employee_fields(name, position)
        with translate_store_errors(), unit_of_work(self._session):
            employee = self._employees.add(user_id=user_id, name=name, position=position)
            summary = EmployeeSummary.from_row(employee)
        LOGGER.info("Employee created", extra={"employee_id": summary.id})
        return summary

    def update_employee(
        self, user_id: str, employee_id: str, name: str, position: str
    ) -> EmployeeSummary:
        name, position = validate_employee_fields(name, position)
        with translate_store_errors(), unit_of_work(self._session):
            employee = self._employees.get_for_owner(user_id, employee_id)
            if employee is None:
                raise NotFoundError("Employee not found")
            employee.name = name
            employee.position = position
            self._session.flush()
            summary = EmployeeSummary.from_row(employee)
        LOGGER.info("Employee updated", extra={"employee_id": employee_id})
        return summary

    def delete_employee(self, user_id: str, employee_id: str) -> int:
        """Delete an employee and, in the same transaction, its salary records.

        Returns the number of salary records removed alongside the employee.
        """

        with translate_store_errors(), unit_of_work(self._session):
            if self._employees.get_for_owner(user_id, employee_id) is None:
                raise NotFoundError("Employee not found")
            removed = self._employees.delete_with_records(user_id, employee_id)
        LOGGER.info(
            "Employee deleted",
            extra={"employee_id": employee_id, "salary_records_removed": removed},
        )
        return removed


__all__ = ["EmployeeService"]
