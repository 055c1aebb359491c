"""Repositories encapsulating the ledger's SQL."""

from .base import BaseRepository, translate_store_errors
from .employees import EmployeeRepository
from .salary_records import SalaryRecordRepository
from .users import UserRepository

__all__ = [
    "BaseRepository",
    "EmployeeRepository",
    "SalaryRecordRepository",
    "UserRepository",
    "translate_store_errors",
]
