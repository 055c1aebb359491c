"""Employee CRUD routes, scoped to the logged-in user."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from salary_ledger.core.security import get_authenticated_user
from salary_ledger.dependencies import get_employee_service
from salary_ledger.domain import UserProfile
from salary_ledger.schemas import EmployeeDeleted, EmployeeOut, EmployeePayload
from salary_ledger.services import EmployeeService

router = APIRouter(prefix="/employees", tags=["employees"])


@router.get("", response_model=list[EmployeeOut])
def list_employees(
    user: UserProfile = Depends(get_authenticated_user),
    service: EmployeeService = Depends(get_employee_service),
) -> list[EmployeeOut]:
    return [EmployeeOut.model_validate(item) for item in service.list_employees(user.id)]


@router.post("", response_model=EmployeeOut, status_code=status.HTTP_201_CREATED)
def create_employee(
    payload: EmployeePayload,
    user: UserProfile = Depends(get_authenticated_user),
    service: EmployeeService = Depends(get_employee_service),
) -> EmployeeOut:
    employee = service.create_employee(user.id, payload.name, payload.position)
    return EmployeeOut.model_validate(employee)


@router.put("/{employee_id}", response_model=EmployeeOut)
def update_employee(
    employee_id: str,
    payload: EmployeePayload,
    user: UserProfile = Depends(get_authenticated_user),
    service: EmployeeService = Depends(get_employee_service),
) -> EmployeeOut:
    employee = service.update_employee(user.id, employee_id, payload.name, payload.position)
    return EmployeeOut.model_validate(employee)


@router.delete("/{employee_id}", response_model=EmployeeDeleted)
def delete_employee(
    employee_id: str,
    user: UserProfile = Depends(get_authenticated_user),
    service: EmployeeService = Depends(get_employee_service),
) -> EmployeeDeleted:
    """Delete the employee together with its salary records."""

    removed = service.delete_employee(user.id, employee_id)
    return EmployeeDeleted(id=employee_id, salary_records_removed=removed)


__all__ = ["router"]
