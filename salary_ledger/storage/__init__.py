"""Local key-value persistence used by the local identity backend and sessions."""

from .local import AUTH_USER_KEY, REGISTERED_USERS_KEY, LocalStorage

__all__ = ["AUTH_USER_KEY", "LocalStorage", "REGISTERED_USERS_KEY"]
