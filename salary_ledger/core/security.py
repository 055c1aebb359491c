"""Signed session marker issued after login and verified on every request."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from functools import lru_cache

import jwt
from fastapi import HTTPException, Request, status
from jwt import ExpiredSignatureError, InvalidTokenError

from salary_ledger.core.config import AuthSettings, get_settings
from salary_ledger.domain import UserProfile


class AuthenticationError(Exception):
    """Raised when a session token cannot be validated."""


class SecurityProvider:
    """Issue and verify JWT session markers carrying the public profile."""

    def __init__(self, settings: AuthSettings) -> None:
        self._settings = settings

    @property
    def cookie_name(self) -> str:
        """Return the cookie name used for the session token."""

        return self._settings.cookie_name

    @property
    def token_ttl_seconds(self) -> int:
        """Return the session token lifetime in seconds."""

        return int(self._settings.access_token_expire_minutes * 60)

    def create_access_token(self, user: UserProfile, *, now: datetime | None = None) -> str:
        """Create a signed JWT for the logged-in user."""

        issued = now or datetime.now(tz=timezone.utc)
        expires = issued + timedelta(minutes=self._settings.access_token_expire_minutes)
        payload: dict[str, object] = {
            "sub": user.id,
            "email": user.email,
            "name": user.name,
            "iat": int(issued.timestamp()),
            "exp": int(expires.timestamp()),
        }
        return jwt.encode(payload, self._settings.secret_key, algorithm=self._settings.algorithm)

    def decode_token(self, token: str) -> UserProfile:
        """Decode a JWT and return the profile it was issued for."""

        try:
            payload = jwt.decode(
                token,
                self._settings.secret_key,
                algorithms=[self._settings.algorithm],
            )
        except ExpiredSignatureError as exc:
            raise AuthenticationError("Token expired") from exc
        except InvalidTokenError as exc:
            raise AuthenticationError("Invalid token") from exc

        claims = [payload.get("sub"), payload.get("email"), payload.get("name")]
        if not all(isinstance(value, str) and value for value in claims):
            raise AuthenticationError("Token payload missing required claims")
        user_id, email, name = claims
        return UserProfile(id=user_id, email=email, name=name)


@lru_cache(maxsize=1)
def get_security_provider() -> SecurityProvider:
    """Return a cached security provider instance."""

    return SecurityProvider(get_settings().auth)


def get_authenticated_user(request: Request) -> UserProfile:
    """Retrieve the logged-in user placed on the request by the middleware."""

    user = getattr(request.state, "user", None)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Login required")
    return user


__all__ = [
    "AuthenticationError",
    "SecurityProvider",
    "get_authenticated_user",
    "get_security_provider",
]
