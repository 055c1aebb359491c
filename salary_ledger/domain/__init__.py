"""Domain objects shared by services and outer surfaces."""

from .ledger import (
    EmployeeSummary,
    ExpenseInput,
    ExpenseLine,
    SalaryRecordWithExpenses,
    UserProfile,
    compute_expenses_total,
    compute_grand_total,
)

__all__ = [
    "EmployeeSummary",
    "ExpenseInput",
    "ExpenseLine",
    "SalaryRecordWithExpenses",
    "UserProfile",
    "compute_expenses_total",
    "compute_grand_total",
]
