"""Application middleware resolving the session cookie into a user."""
from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Iterable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from salary_ledger.core.logger import get_logger, log_context
from salary_ledger.core.security import AuthenticationError, SecurityProvider
from salary_ledger.domain import UserProfile

LOGGER = get_logger(__name__)

DEFAULT_EXEMPT_PATHS = frozenset(
    {
        "/auth/login",
        "/auth/register",
        "/auth/logout",
        "/health",
        "/openapi.json",
        "/docs",
        "/redoc",
        "/favicon.ico",
    }
)


class AuthMiddleware(BaseHTTPMiddleware):
    """Reject unauthenticated requests to non-exempt paths with a 401."""

    def __init__(
        self,
        app,
        security_provider: SecurityProvider,
        *,
        exempt_paths: Iterable[str] | None = None,
        exempt_prefixes: Iterable[str] | None = None,
    ) -> None:
        super().__init__(app)
        self._security_provider = security_provider
        self._exempt_paths = set(exempt_paths or ()) | DEFAULT_EXEMPT_PATHS
        self._exempt_prefixes = tuple(exempt_prefixes or ("/docs/",))

    def _is_exempt(self, path: str) -> bool:
        """Return ``True`` when the request path should bypass authentication."""

        if path in self._exempt_paths:
            return True
        return any(path.startswith(prefix) for prefix in self._exempt_prefixes)

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        token = request.cookies.get(self._security_provider.cookie_name)
        user: UserProfile | None = None
        invalid_token = False

        if token:
            try:
                user = self._security_provider.decode_token(token)
            except AuthenticationError as exc:
                LOGGER.info("Failed to decode session token", extra={"reason": str(exc)})
                invalid_token = True

        request.state.user = user
        path = request.url.path

        if user is None and not self._is_exempt(path):
            response = JSONResponse({"detail": "Login required"}, status_code=401)
            if invalid_token:
                response.delete_cookie(self._security_provider.cookie_name)
            return response

        with log_context.scoped(user_id=user.id if user else None, path=path):
            response = await call_next(request)
        if invalid_token and user is None:
            response.delete_cookie(self._security_provider.cookie_name)
        return response


__all__ = ["AuthMiddleware"]
