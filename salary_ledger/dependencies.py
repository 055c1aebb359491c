"""Shared FastAPI dependency definitions."""
from __future__ import annotations

from collections.abc import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from salary_ledger.db.session import get_default_sessionmaker
from salary_ledger.services import (
    EmployeeService,
    IdentityBackend,
    SalaryRecordService,
    get_identity_backend,
)


def get_db_session() -> Generator[Session, None, None]:
    """Yield a database session for the request lifecycle."""

    session = get_default_sessionmaker()()
    try:
        yield session
    finally:
        session.close()


def get_identity() -> IdentityBackend:
    return get_identity_backend()


def get_employee_service(session: Session = Depends(get_db_session)) -> EmployeeService:
    return EmployeeService(session)


def get_salary_record_service(
    session: Session = Depends(get_db_session),
) -> SalaryRecordService:
    return SalaryRecordService(session)
