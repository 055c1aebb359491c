"""FastAPI application instance and startup hooks."""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from salary_ledger import __version__
from salary_ledger.core import get_logger, get_settings
from salary_ledger.core.errors import LedgerError
from salary_ledger.core.logger import init_logging
from salary_ledger.core.security import get_security_provider
from salary_ledger.db.schema import create_schema
from salary_ledger.db.session import get_default_engine
from salary_ledger.middleware import AuthMiddleware
from salary_ledger.routers import auth_router, employees_router, salary_records_router

LOGGER = get_logger(__name__)


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    """Render service errors as ``{"detail": message}`` with the mapped status."""

    LOGGER.info(
        "Request failed",
        extra={"error": type(exc).__name__, "status": exc.status_code, "path": request.url.path},
    )
    return JSONResponse({"detail": exc.message}, status_code=exc.status_code)


def create_app(*, create_tables: bool = True) -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()
    init_logging(settings.logging)

    app = FastAPI(title="Salary Ledger", version=__version__)
    app.add_middleware(AuthMiddleware, security_provider=get_security_provider())
    app.add_exception_handler(LedgerError, ledger_error_handler)
    app.include_router(auth_router)
    app.include_router(employees_router)
    app.include_router(salary_records_router)

    if create_tables:

        @app.on_event("startup")
        def ensure_schema() -> None:
            LOGGER.info("Ensuring database schema on startup")
            try:
                create_schema(get_default_engine())
            except Exception:  # pragma: no cover - fail fast on startup issues
                LOGGER.exception("Failed to create database schema")
                raise

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok", "identity_backend": settings.auth.backend}

    LOGGER.info("FastAPI application initialised")
    return app


app = create_app()
