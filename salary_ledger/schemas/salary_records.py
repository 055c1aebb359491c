"""Schemas for salary records, their expense lines and derived totals."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from salary_ledger.domain import SalaryRecordWithExpenses

CENTS = Decimal("0.01")


class ExpensePayload(BaseModel):
    """Expense line as submitted; month is zero based."""

    category: str
    amount: Decimal
    expense_day: int
    expense_month: int
    expense_year: int


class SalaryRecordUpsert(BaseModel):
    employee_id: str
    month: int = Field(description="Zero-based month (0 = January)")
    year: int
    salary: Decimal
    expenses: list[ExpensePayload] = Field(default_factory=list)


class ExpenseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    salary_record_id: str
    category: str
    amount: Decimal
    expense_day: int
    expense_month: int
    expense_year: int

    @field_serializer("amount")
    def serialize_amount(self, value: Decimal) -> str:
        return format(value.quantize(CENTS), "f")


class SalaryRecordOut(BaseModel):
    """Salary record merged with its expenses and computed totals."""

    id: str
    employee_id: str
    month: int
    year: int
    period_label: str
    salary: Decimal
    expenses: list[ExpenseOut]
    expenses_total: Decimal
    grand_total: Decimal

    @field_serializer("salary", "expenses_total", "grand_total")
    def serialize_amount(self, value: Decimal) -> str:
        return format(value.quantize(CENTS), "f")

    @classmethod
    def from_domain(cls, record: SalaryRecordWithExpenses) -> "SalaryRecordOut":
        return cls(
            id=record.id,
            employee_id=record.employee_id,
            month=record.month,
            year=record.year,
            period_label=record.period_label,
            salary=record.salary,
            expenses=[ExpenseOut.model_validate(expense) for expense in record.expenses],
            expenses_total=record.expenses_total,
            grand_total=record.grand_total,
        )
