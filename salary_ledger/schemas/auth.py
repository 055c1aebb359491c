"""Schemas for registration, login and the public user profile."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class RegisterRequest(BaseModel):
    # Content checks (length, email shape) happen in the identity service.
    name: str = ""
    email: str = ""
    password: str = ""


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class UserProfileOut(BaseModel):
    """Public profile of the logged-in user."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str
