"""Configuration system for the salary ledger."""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
INSTANCE_DIR = PROJECT_ROOT / "instance"

# Load .env file from project root
env_path = PROJECT_ROOT / ".env"
load_dotenv(dotenv_path=env_path)

AUTH_BACKENDS = ("database", "local")
_FALSE_VALUES = {"0", "false", "False", "no", ""}


def _default_sqlite_url() -> str:
    return f"sqlite:///{(INSTANCE_DIR / 'salary_ledger.db').as_posix()}"


@dataclass(slots=True)
class DatabaseSettings:
    """Connection details for the relational store."""

    url: str

    @property
    def masked_url(self) -> str:
        """Return the URL with any password replaced by ``***``."""

        scheme, sep, rest = self.url.partition("://")
        if not sep or "@" not in rest:
            return self.url
        credentials, host = rest.rsplit("@", 1)
        if ":" in credentials:
            user = credentials.split(":", 1)[0]
            credentials = f"{user}:***"
        return f"{scheme}://{credentials}@{host}"


@dataclass(slots=True)
class AuthSettings:
    """Authentication settings loaded from environment variables."""

    backend: str
    secret_key: str
    algorithm: str
    access_token_expire_minutes: int
    password_hash_method: str
    local_storage_path: Path | None
    cookie_name: str = "access_token"


@dataclass(slots=True)
class LoggingSettings:
    level: str = "INFO"
    log_dir: Path | None = None


@dataclass(slots=True)
class Settings:
    """Top-level application configuration container."""

    database: DatabaseSettings
    auth: AuthSettings
    logging: LoggingSettings
    sqlalchemy_echo: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Load configuration values from environment variables."""

        def _get_env(name: str, default: str) -> str:
            return os.getenv(name, default)

        def _optional_path(value: str) -> Path | None:
            value = value.strip()
            if not value:
                return None
            return Path(value)

        backend = _get_env("AUTH_BACKEND", "database").strip().lower()
        if backend not in AUTH_BACKENDS:
            raise ValueError(
                f"AUTH_BACKEND must be one of {', '.join(AUTH_BACKENDS)}; got {backend!r}."
            )

        raw_expiry = _get_env("JWT_EXPIRE_MINUTES", "120").strip()
        if not raw_expiry.isdigit():
            raise ValueError("JWT_EXPIRE_MINUTES must be a positive integer.")

        database = DatabaseSettings(url=_get_env("DATABASE_URL", "") or _default_sqlite_url())
        auth = AuthSettings(
            backend=backend,
            secret_key=_get_env("JWT_SECRET_KEY", "change-me"),
            algorithm=_get_env("JWT_ALGORITHM", "HS256"),
            access_token_expire_minutes=int(raw_expiry),
            password_hash_method=_get_env("PASSWORD_HASH_METHOD", "scrypt"),
            local_storage_path=_optional_path(
                _get_env("LOCAL_STORAGE_PATH", str(INSTANCE_DIR / "local_storage.json"))
            ),
            cookie_name=_get_env("AUTH_COOKIE_NAME", "access_token"),
        )
        log_settings = LoggingSettings(
            level=_get_env("LOG_LEVEL", "INFO"),
            log_dir=_optional_path(_get_env("LOG_DIR", "")),
        )
        return cls(
            database=database,
            auth=auth,
            logging=log_settings,
            sqlalchemy_echo=_get_env("SQLALCHEMY_ECHO", "0") not in _FALSE_VALUES,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance."""

    settings = Settings.from_env()

    # Import locally to avoid circular dependencies during module import time.
    from .logger import get_logger

    logger = get_logger(__name__)
    logger.debug(
        "Settings initialised",
        extra={
            "sqlalchemy_echo": settings.sqlalchemy_echo,
            "database": settings.database.masked_url,
            "auth": {
                "backend": settings.auth.backend,
                "token_ttl": settings.auth.access_token_expire_minutes,
                "local_storage": str(settings.auth.local_storage_path or "<memory>"),
            },
        },
    )
    return settings
