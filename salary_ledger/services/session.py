"""Explicit session context replacing a process-wide "current user" global."""
from __future__ import annotations

import json
from typing import Protocol

from salary_ledger.core.errors import NotAuthenticated
from salary_ledger.core.logger import get_logger, log_context
from salary_ledger.domain import UserProfile
from salary_ledger.storage import AUTH_USER_KEY, LocalStorage

from .identity import IdentityBackend

LOGGER = get_logger(__name__)


class SessionStore(Protocol):
    """Persists the logged-in profile between runs."""

    def load(self) -> UserProfile | None:
        ...

    def save(self, profile: UserProfile) -> None:
        ...

    def clear(self) -> None:
        ...


class LocalSessionStore:
    """Keep the logged-in profile under the ``auth_user`` key of local storage."""

    def __init__(self, storage: LocalStorage) -> None:
        self._storage = storage

    def load(self) -> UserProfile | None:
        raw = self._storage.get_item(AUTH_USER_KEY)
        if not raw:
            return None
        try:
            return UserProfile.from_mapping(json.loads(raw))
        except (json.JSONDecodeError, KeyError, TypeError):
            LOGGER.warning("Discarding unreadable stored session")
            self._storage.remove_item(AUTH_USER_KEY)
            return None

    def save(self, profile: UserProfile) -> None:
        self._storage.set_item(AUTH_USER_KEY, json.dumps(profile.to_dict()))

    def clear(self) -> None:
        self._storage.remove_item(AUTH_USER_KEY)


class AuthSession:
    """The logged-in user for one client, restored from ``store`` on creation."""

    def __init__(self, backend: IdentityBackend, store: SessionStore) -> None:
        self._backend = backend
        self._store = store
        self._user = store.load()
        if self._user is not None:
            log_context.bind(user_id=self._user.id)

    @property
    def current_user(self) -> UserProfile | None:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def require_user(self) -> UserProfile:
        if self._user is None:
            raise NotAuthenticated()
        return self._user

    def _establish(self, profile: UserProfile) -> UserProfile:
        self._store.save(profile)
        self._user = profile
        log_context.bind(user_id=profile.id)
        return profile

    def register(self, name: str, email: str, password: str) -> UserProfile:
        return self._establish(self._backend.register(name, email, password))

    def login(self, email: str, password: str) -> UserProfile:
        return self._establish(self._backend.login(email, password))

    def logout(self) -> None:
        self._store.clear()
        self._user = None
        log_context.unbind("user_id")
        LOGGER.info("Logged out")


__all__ = ["AuthSession", "LocalSessionStore", "SessionStore"]
