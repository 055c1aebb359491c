"""Identity resolution: map credentials to a user profile, or create one.

Two interchangeable backends implement :class:`IdentityBackend`:

* :class:`DatabaseIdentityBackend` stores salted password hashes in the
  relational store and relies on its unique constraint for duplicate emails.
* :class:`LocalIdentityBackend` keeps every registered user, password
  included, in :class:`~salary_ledger.storage.LocalStorage`. It is meant for
  single-machine use only and is materially weaker.

The backend is chosen once from configuration by :func:`build_identity_backend`.
"""
from __future__ import annotations

import json
import time
from functools import lru_cache
from typing import Protocol, runtime_checkable

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from werkzeug.security import check_password_hash, generate_password_hash

from salary_ledger.core.config import AuthSettings, get_settings
from salary_ledger.core.errors import DuplicateEmail, InvalidCredentials, StoreError
from salary_ledger.core.logger import get_logger
from salary_ledger.db.session import get_default_sessionmaker
from salary_ledger.domain import UserProfile
from salary_ledger.repositories import UserRepository, translate_store_errors
from salary_ledger.storage import REGISTERED_USERS_KEY, LocalStorage

from .validation import validate_login, validate_registration

LOGGER = get_logger(__name__)


@runtime_checkable
class IdentityBackend(Protocol):
    """Capability set shared by every identity backend."""

    def register(self, name: str, email: str, password: str) -> UserProfile:
        ...

    def login(self, email: str, password: str) -> UserProfile:
        ...


class DatabaseIdentityBackend:
    """Identity backend persisting hashed credentials in the ``users`` table."""

    def __init__(
        self,
        session_factory: sessionmaker | None = None,
        *,
        hash_method: str = "scrypt",
    ) -> None:
        self._session_factory = session_factory or get_default_sessionmaker()
        self._hash_method = hash_method

    def register(self, name: str, email: str, password: str) -> UserProfile:
        validate_registration(name, email, password)
        hashed = generate_password_hash(password, method=self._hash_method)

        with self._session_factory() as session:
            try:
                user = UserRepository(session).add(name=name, email=email, password=hashed)
                profile = UserProfile.from_row(user)
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                LOGGER.info("Registration rejected: email already registered")
                raise DuplicateEmail() from exc
            except SQLAlchemyError as exc:
                session.rollback()
                raise StoreError(str(getattr(exc, "orig", None) or exc)) from exc

        LOGGER.info("User registered", extra={"user_id": profile.id})
        return profile

    def login(self, email: str, password: str) -> UserProfile:
        validate_login(email, password)

        with self._session_factory() as session, translate_store_errors():
            user = UserRepository(session).get_by_email(email)
            if user is None or not check_password_hash(user.password, password):
                LOGGER.info("Invalid login attempt")
                raise InvalidCredentials()
            profile = UserProfile.from_row(user)

        LOGGER.info("User logged in", extra={"user_id": profile.id})
        return profile


class LocalIdentityBackend:
    """Identity backend keeping registered users in local storage.

    Passwords are compared as stored; email uniqueness is checked by scanning
    the registered-user list.
    """

    def __init__(self, storage: LocalStorage) -> None:
        self._storage = storage

    def _load_users(self) -> list[dict[str, str]]:
        raw = self._storage.get_item(REGISTERED_USERS_KEY)
        if not raw:
            return []
        try:
            users = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StoreError(f"Registered users are unreadable: {exc}") from exc
        if not isinstance(users, list) or not all(isinstance(user, dict) for user in users):
            raise StoreError("Registered users are unreadable: expected a list of objects")
        return users

    @staticmethod
    def _new_id(users: list[dict[str, str]]) -> str:
        taken = {str(user.get("id")) for user in users}
        candidate = int(time.time() * 1000)
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)

    def register(self, name: str, email: str, password: str) -> UserProfile:
        validate_registration(name, email, password)

        users = self._load_users()
        if any(user.get("email") == email for user in users):
            LOGGER.info("Registration rejected: email already registered")
            raise DuplicateEmail()

        record = {"id": self._new_id(users), "name": name, "email": email, "password": password}
        users.append(record)
        self._storage.set_item(REGISTERED_USERS_KEY, json.dumps(users))

        profile = UserProfile.from_mapping(record)
        LOGGER.info("User registered", extra={"user_id": profile.id})
        return profile

    def login(self, email: str, password: str) -> UserProfile:
        validate_login(email, password)

        for user in self._load_users():
            if user.get("email") == email and user.get("password") == password:
                profile = UserProfile.from_mapping(user)
                LOGGER.info("User logged in", extra={"user_id": profile.id})
                return profile

        LOGGER.info("Invalid login attempt")
        raise InvalidCredentials()


def build_identity_backend(
    settings: AuthSettings,
    *,
    session_factory: sessionmaker | None = None,
    storage: LocalStorage | None = None,
) -> IdentityBackend:
    """Instantiate the backend selected by ``settings.backend``."""

    if settings.backend == "local":
        return LocalIdentityBackend(storage or LocalStorage(settings.local_storage_path))
    if settings.backend == "database":
        return DatabaseIdentityBackend(
            session_factory,
            hash_method=settings.password_hash_method,
        )
    raise ValueError(f"Unknown identity backend {settings.backend!r}")


@lru_cache(maxsize=1)
def get_identity_backend() -> IdentityBackend:
    """Return the process-wide identity backend."""

    backend = build_identity_backend(get_settings().auth)
    LOGGER.debug("Identity backend ready", extra={"backend": type(backend).__name__})
    return backend


__all__ = [
    "DatabaseIdentityBackend",
    "IdentityBackend",
    "LocalIdentityBackend",
    "build_identity_backend",
    "get_identity_backend",
]
