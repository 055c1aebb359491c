"""Domain objects returned by the identity and ledger services."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Mapping, Sequence

from salary_ledger.core.formatting import period_label


@dataclass(frozen=True, slots=True)
class UserProfile:
    """Public identity of a user; never carries the password."""

    id: str
    email: str
    name: str

    @classmethod
    def from_row(cls, row: object) -> "UserProfile":
        return cls(
            id=str(getattr(row, "id")),
            email=str(getattr(row, "email")),
            name=str(getattr(row, "name")),
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> "UserProfile":
        return cls(id=str(data["id"]), email=str(data["email"]), name=str(data["name"]))

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "email": self.email, "name": self.name}


@dataclass(frozen=True, slots=True)
class EmployeeSummary:
    id: str
    user_id: str
    name: str
    position: str

    @classmethod
    def from_row(cls, row: object) -> "EmployeeSummary":
        return cls(
            id=str(getattr(row, "id")),
            user_id=str(getattr(row, "user_id")),
            name=str(getattr(row, "name")),
            position=str(getattr(row, "position")),
        )


@dataclass(frozen=True, slots=True)
class ExpenseInput:
    """An expense line as submitted, before it is attached to a record."""

    category: str
    amount: Decimal
    expense_day: int
    expense_month: int
    expense_year: int


@dataclass(frozen=True, slots=True)
class ExpenseLine:
    id: str
    user_id: str
    salary_record_id: str
    category: str
    amount: Decimal
    expense_day: int
    expense_month: int
    expense_year: int

    @classmethod
    def from_row(cls, row: object) -> "ExpenseLine":
        return cls(
            id=str(getattr(row, "id")),
            user_id=str(getattr(row, "user_id")),
            salary_record_id=str(getattr(row, "salary_record_id")),
            category=str(getattr(row, "category")),
            amount=_decimal(getattr(row, "amount")),
            expense_day=int(getattr(row, "expense_day")),
            expense_month=int(getattr(row, "expense_month")),
            expense_year=int(getattr(row, "expense_year")),
        )


@dataclass(frozen=True, slots=True)
class SalaryRecordWithExpenses:
    """A salary record merged with the expense lines it owns."""

    id: str
    user_id: str
    employee_id: str
    month: int
    year: int
    salary: Decimal
    expenses: Sequence[ExpenseLine] = ()

    @classmethod
    def assemble(cls, row: object, expenses: Iterable[ExpenseLine]) -> "SalaryRecordWithExpenses":
        return cls(
            id=str(getattr(row, "id")),
            user_id=str(getattr(row, "user_id")),
            employee_id=str(getattr(row, "employee_id")),
            month=int(getattr(row, "month")),
            year=int(getattr(row, "year")),
            salary=_decimal(getattr(row, "salary")),
            expenses=tuple(expenses),
        )

    @property
    def expenses_total(self) -> Decimal:
        return compute_expenses_total(self.expenses)

    @property
    def grand_total(self) -> Decimal:
        return compute_grand_total(self)

    @property
    def period_label(self) -> str:
        return period_label(self.month, self.year)


def compute_expenses_total(expenses: Iterable[ExpenseLine | ExpenseInput]) -> Decimal:
    """Sum expense amounts; an empty iterable sums to ``Decimal(0)``."""

    return sum((_decimal(expense.amount) for expense in expenses), Decimal(0))


def compute_grand_total(record: SalaryRecordWithExpenses) -> Decimal:
    """Return ``salary + sum(expense amounts)`` without touching ``record``."""

    return _decimal(record.salary) + compute_expenses_total(record.expenses)


def _decimal(value: object) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


__all__ = [
    "EmployeeSummary",
    "ExpenseInput",
    "ExpenseLine",
    "SalaryRecordWithExpenses",
    "UserProfile",
    "compute_expenses_total",
    "compute_grand_total",
]
