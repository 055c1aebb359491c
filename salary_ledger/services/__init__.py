"""Service layer entrypoints for identity and ledger logic."""

from .employees import EmployeeService
from .identity import (
    DatabaseIdentityBackend,
    IdentityBackend,
    LocalIdentityBackend,
    build_identity_backend,
    get_identity_backend,
)
from .salary_records import SalaryRecordService
from .session import AuthSession, LocalSessionStore, SessionStore

__all__ = [
    "AuthSession",
    "DatabaseIdentityBackend",
    "EmployeeService",
    "IdentityBackend",
    "LocalIdentityBackend",
    "LocalSessionStore",
    "SalaryRecordService",
    "SessionStore",
    "build_identity_backend",
    "get_identity_backend",
]
