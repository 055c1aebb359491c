"""Shared fixtures: an in-memory database, storage and an API client."""
from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTH_BACKEND", "database")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-with-enough-length-for-hs256")
os.environ.setdefault("PASSWORD_HASH_METHOD", "pbkdf2:sha256:1000")
os.environ.setdefault("LOCAL_STORAGE_PATH", "")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402

from salary_ledger.core.logger import shutdown_logging  # noqa: E402
from salary_ledger.db import create_schema, create_sync_engine  # noqa: E402
from salary_ledger.dependencies import get_db_session, get_identity  # noqa: E402
from salary_ledger.domain import EmployeeSummary, UserProfile  # noqa: E402
from salary_ledger.main import create_app  # noqa: E402
from salary_ledger.services import DatabaseIdentityBackend, EmployeeService  # noqa: E402
from salary_ledger.storage import LocalStorage  # noqa: E402

FAST_HASH = "pbkdf2:sha256:1000"


@pytest.fixture(scope="session", autouse=True)
def _stop_logging():
    yield
    shutdown_logging()


@pytest.fixture()
def engine():
    """Provide a fresh in-memory database for each test."""

    engine = create_sync_engine("sqlite://")
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture()
def session(session_factory) -> Session:
    with session_factory() as session:
        yield session


@pytest.fixture()
def storage(tmp_path) -> LocalStorage:
    return LocalStorage(tmp_path / "local_storage.json")


@pytest.fixture()
def db_identity(session_factory) -> DatabaseIdentityBackend:
    return DatabaseIdentityBackend(session_factory, hash_method=FAST_HASH)


@pytest.fixture()
def owner(db_identity) -> UserProfile:
    return db_identity.register("Asha Rao", "asha@example.com", "secret1")


@pytest.fixture()
def other_owner(db_identity) -> UserProfile:
    return db_identity.register("Vikram Shah", "vikram@example.com", "secret2")


@pytest.fixture()
def employee(session, owner) -> EmployeeSummary:
    return EmployeeService(session).create_employee(owner.id, "Meena", "Cook")


@pytest.fixture()
def client(session_factory, db_identity) -> TestClient:
    """API client wired to the in-memory database."""

    app = create_app(create_tables=False)

    def _session_override():
        with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = _session_override
    app.dependency_overrides[get_identity] = lambda: db_identity
    with TestClient(app) as test_client:
        yield test_client
