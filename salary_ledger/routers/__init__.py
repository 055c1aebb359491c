"""API routers exposed by the application."""

from .auth import router as auth_router
from .employees import router as employees_router
from .salary_records import router as salary_records_router

__all__ = ["auth_router", "employees_router", "salary_records_router"]
