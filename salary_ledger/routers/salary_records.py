"""Salary-record routes: list with totals and upsert by period."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from salary_ledger.core.security import get_authenticated_user
from salary_ledger.dependencies import get_salary_record_service
from salary_ledger.domain import ExpenseInput, UserProfile
from salary_ledger.schemas import SalaryRecordOut, SalaryRecordUpsert
from salary_ledger.services import SalaryRecordService

router = APIRouter(prefix="/salary-records", tags=["salary-records"])


@router.get("", response_model=list[SalaryRecordOut])
def list_salary_records(
    user: UserProfile = Depends(get_authenticated_user),
    service: SalaryRecordService = Depends(get_salary_record_service),
) -> list[SalaryRecordOut]:
    """Return every record of the user, most recent period first."""

    return [SalaryRecordOut.from_domain(record) for record in service.list_salary_records(user.id)]


@router.put("", response_model=SalaryRecordOut)
def upsert_salary_record(
    payload: SalaryRecordUpsert,
    user: UserProfile = Depends(get_authenticated_user),
    service: SalaryRecordService = Depends(get_salary_record_service),
) -> SalaryRecordOut:
    """Create the record for the period, or replace salary and expenses of the existing one."""

    record = service.upsert_salary_record(
        user.id,
        payload.employee_id,
        payload.month,
        payload.year,
        payload.salary,
        [ExpenseInput(**expense.model_dump()) for expense in payload.expenses],
    )
    return SalaryRecordOut.from_domain(record)


__all__ = ["router"]
