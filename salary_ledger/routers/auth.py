"""Authentication routes: register, login, logout and the current profile."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from salary_ledger.core.logger import get_logger
from salary_ledger.core.security import (
    SecurityProvider,
    get_authenticated_user,
    get_security_provider,
)
from salary_ledger.dependencies import get_identity
from salary_ledger.domain import UserProfile
from salary_ledger.schemas import LoginRequest, RegisterRequest, UserProfileOut
from salary_ledger.services import IdentityBackend

LOGGER = get_logger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


def get_security() -> SecurityProvider:
    return get_security_provider()


def _start_session(response: Response, security: SecurityProvider, user: UserProfile) -> None:
    response.set_cookie(
        security.cookie_name,
        security.create_access_token(user),
        max_age=security.token_ttl_seconds,
        httponly=True,
        samesite="lax",
    )


@router.post("/register", response_model=UserProfileOut, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    response: Response,
    identity: IdentityBackend = Depends(get_identity),
    security: SecurityProvider = Depends(get_security),
) -> UserProfileOut:
    """Create an account and log it in."""

    user = identity.register(payload.name, payload.email, payload.password)
    _start_session(response, security, user)
    return UserProfileOut.model_validate(user)


@router.post("/login", response_model=UserProfileOut)
def login(
    payload: LoginRequest,
    response: Response,
    identity: IdentityBackend = Depends(get_identity),
    security: SecurityProvider = Depends(get_security),
) -> UserProfileOut:
    """Verify credentials and issue the session cookie."""

    user = identity.login(payload.email, payload.password)
    _start_session(response, security, user)
    return UserProfileOut.model_validate(user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(security: SecurityProvider = Depends(get_security)) -> Response:
    """Clear the session cookie."""

    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(security.cookie_name)
    return response


@router.get("/me", response_model=UserProfileOut)
def me(user: UserProfile = Depends(get_authenticated_user)) -> UserProfileOut:
    return UserProfileOut.model_validate(user)


__all__ = ["router"]
