"""Pydantic schemas for request and response payloads."""

from .auth import LoginRequest, RegisterRequest, UserProfileOut
from .employees import EmployeeDeleted, EmployeeOut, EmployeePayload
from .salary_records import ExpenseOut, ExpensePayload, SalaryRecordOut, SalaryRecordUpsert

__all__ = [
    "EmployeeDeleted",
    "EmployeeOut",
    "EmployeePayload",
    "ExpenseOut",
    "ExpensePayload",
    "LoginRequest",
    "RegisterRequest",
    "SalaryRecordOut",
    "SalaryRecordUpsert",
    "UserProfileOut",
]
