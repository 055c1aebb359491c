"""Schemas for employee payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class EmployeePayload(BaseModel):
    name: str = ""
    position: str = ""


class EmployeeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    name: str
    position: str


class EmployeeDeleted(BaseModel):
    id: str
    salary_records_removed: int
