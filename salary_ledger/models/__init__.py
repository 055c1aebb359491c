"""Database models for the salary ledger."""
from __future__ import annotations

from .base import Base, EntityBase, new_id, utcnow
from .employees import Employee
from .salary import Expense, SalaryRecord
from .users import User

__all__ = [
    "Base",
    "EntityBase",
    "Employee",
    "Expense",
    "SalaryRecord",
    "User",
    "new_id",
    "utcnow",
]
