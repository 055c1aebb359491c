"""Salary-record ledger: replace-on-conflict upsert and batched listing."""
from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Mapping

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from salary_ledger.core.errors import NotFoundError
from salary_ledger.core.logger import get_logger, timeit
from salary_ledger.db.session import unit_of_work
from salary_ledger.domain import ExpenseInput, ExpenseLine, SalaryRecordWithExpenses
from salary_ledger.repositories import (
    EmployeeRepository,
    SalaryRecordRepository,
    translate_store_errors,
)

from .validation import normalize_expenses, to_amount, validate_month, validate_year

LOGGER = get_logger(__name__)


class SalaryRecordService:
    """Maintain at most one salary record per (owner, employee, month, year)."""

    def __init__(self, session: Session) -> None:
        self._session = session
        self._records = SalaryRecordRepository(session)
        self._employees = EmployeeRepository(session)

    def upsert_salary_record(
        self,
        user_id: str,
        employee_id: str,
        month: int,
        year: int,
        salary: Decimal | int | float | str,
        expenses: Iterable[ExpenseInput | Mapping[str, object]] = (),
    ) -> SalaryRecordWithExpenses:
        """Create the record for the period or replace the existing one.

        An existing record keeps its id; its salary is overwritten and its
        expenses are replaced wholesale by ``expenses``. Lookup, update,
        expense deletion and insertion run in a single transaction.
        """

        month = validate_month(month)
        year = validate_year(year)
        amount = to_amount(salary, field="salary")
        lines = normalize_expenses(expenses)

        with translate_store_errors(), unit_of_work(self._session):
            if self._employees.get_for_owner(user_id, employee_id) is None:
                raise NotFoundError("Employee not found")

            record = self._records.find_by_period(user_id, employee_id, month, year)
            created = False
            if record is None:
                try:
                    record = self._records.insert(
                        user_id=user_id,
                        employee_id=employee_id,
                        month=month,
                        year=year,
                        salary=amount,
                    )
                    created = True
                except IntegrityError:
                    # Lost a race with a concurrent insert of the same period.
                    record = self._records.find_by_period(user_id, employee_id, month, year)
                    if record is None:
                        raise
                    LOGGER.info("Concurrent insert detected, updating existing record")

            if not created:
                record.salary = amount
                removed = self._records.delete_expenses(user_id, record.id)
                LOGGER.debug("Replaced %s expense(s) on record %s", removed, record.id)

            rows = self._records.add_expenses(user_id, record.id, lines)
            self._session.flush()
            result = SalaryRecordWithExpenses.assemble(
                record, (ExpenseLine.from_row(row) for row in rows)
            )

        LOGGER.info(
            "Salary record %s",
            "created" if created else "updated",
            extra={"record_id": result.id, "expenses": len(result.expenses)},
        )
        return result

    def list_salary_records(self, user_id: str) -> list[SalaryRecordWithExpenses]:
        """Return the owner's records with expenses, most recent period first.

        Expenses for all records are loaded with one query.
        """

        with translate_store_errors(), timeit(
            "List salary records", logger=LOGGER, unit="records", session=self._session
        ) as timer:
            records = self._records.list_for_owner(user_id)
            grouped = self._records.expenses_by_record(user_id, [record.id for record in records])
            timer.set_total(len(records))

        return [
            SalaryRecordWithExpenses.assemble(
                record, (ExpenseLine.from_row(row) for row in grouped.get(record.id, ()))
            )
            for record in records
        ]


__all__ = ["SalaryRecordService"]
