"""Exception taxonomy shared by the services and the outer surfaces."""
from __future__ import annotations


class LedgerError(Exception):
    """Base class for every error raised by the ledger services."""

    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(LedgerError):
    """Missing or malformed input, detected before any store call."""


class DuplicateEmail(LedgerError):
    """Registration attempted with an email that is already in use."""

    status_code = 409

    def __init__(self, message: str = "Email already registered") -> None:
        super().__init__(message)


class InvalidCredentials(LedgerError):
    """Login failed; unknown email and wrong password are not distinguished."""

    status_code = 401

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(message)


class NotAuthenticated(LedgerError):
    """An operation needed a logged-in user but the session holds none."""

    status_code = 401

    def __init__(self, message: str = "Login required") -> None:
        super().__init__(message)


class NotFoundError(LedgerError):
    """The requested row does not exist for the current owner."""

    status_code = 404


class StoreError(LedgerError):
    """The backing store reported a failure; the message is passed through."""

    status_code = 502


__all__ = [
    "DuplicateEmail",
    "InvalidCredentials",
    "LedgerError",
    "NotAuthenticated",
    "NotFoundError",
    "StoreError",
    "ValidationError",
]
