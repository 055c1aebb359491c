"""Logging for the ledger: rich console output, optional rotating file, queued emission.

Every entry point (``create_app``, the CLI, scripts) calls :func:`init_logging`
once with the :class:`~salary_ledger.core.config.LoggingSettings` it loaded.
Records carry the values bound through :data:`log_context` as a
``key=value`` prefix.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from logging.handlers import QueueHandler, QueueListener, TimedRotatingFileHandler
from pathlib import Path
from queue import SimpleQueue
from threading import RLock
from typing import TYPE_CHECKING, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.traceback import install as install_rich_traceback

from .context import ContextFilter, log_context
from .timing import timeit

if TYPE_CHECKING:  # pragma: no cover
    from salary_ledger.core.config import LoggingSettings

__all__ = [
    "init_logging",
    "get_logger",
    "set_level",
    "shutdown_logging",
    "log_context",
    "timeit",
]

ROOT_LOGGER_NAME = "salary_ledger"
LOG_FILE_NAME = "salary_ledger.log"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(context)s%(message)s"


@dataclass(frozen=True)
class _ActiveConfig:
    level: int
    log_dir: Optional[Path]
    console: bool
    queue: bool
    backup_days: int


_lock = RLock()
_active: _ActiveConfig | None = None
_listener: QueueListener | None = None
_handlers: list[logging.Handler] = []
_context_filter = ContextFilter()


def _parse_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), logging.INFO)


def _console_handler(level: int) -> logging.Handler:
    # stderr keeps CLI table output on stdout clean.
    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_path=False,
        markup=False,
        log_time_format="%Y-%m-%d %H:%M:%S",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(context)s%(message)s"))
    handler.addFilter(_context_filter)
    return handler


def _file_handler(log_dir: Path, level: int, backup_days: int) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = TimedRotatingFileHandler(
        log_dir / LOG_FILE_NAME,
        when="midnight",
        backupCount=backup_days,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    handler.addFilter(_context_filter)
    return handler


def init_logging(
    settings: "LoggingSettings | None" = None,
    *,
    level: str | int | None = None,
    console: bool = True,
    queue: bool = True,
    backup_days: int = 14,
) -> None:
    """Configure the root logger.

    Calling again with the same effective configuration is a no-op; a
    different one replaces the installed handlers.

    Args:
        settings: Level and optional log directory; defaults to INFO, console only
        level: Overrides ``settings.level``
        console: Emit to stderr through rich
        queue: Hand records to a background listener thread
        backup_days: Rotated daily files kept in ``settings.log_dir``
    """

    global _active, _listener

    resolved_level = _parse_level(level if level is not None else getattr(settings, "level", "INFO"))
    log_dir = getattr(settings, "log_dir", None)
    wanted = _ActiveConfig(
        level=resolved_level,
        log_dir=Path(log_dir) if log_dir else None,
        console=console,
        queue=queue,
        backup_days=backup_days,
    )

    with _lock:
        if _active == wanted:
            return
        _teardown_locked()

        install_rich_traceback(show_locals=False)
        handlers: list[logging.Handler] = []
        if wanted.console:
            handlers.append(_console_handler(resolved_level))
        if wanted.log_dir is not None:
            handlers.append(_file_handler(wanted.log_dir, resolved_level, backup_days))

        root = logging.getLogger()
        root.setLevel(logging.NOTSET)
        if wanted.queue and handlers:
            log_queue: SimpleQueue = SimpleQueue()
            queue_handler = QueueHandler(log_queue)
            queue_handler.setLevel(resolved_level)
            # Context is resolved on the emitting thread.
            queue_handler.addFilter(_context_filter)
            _listener = QueueListener(log_queue, *handlers, respect_handler_level=True)
            _listener.start()
            installed = [queue_handler]
        else:
            installed = handlers

        for handler in installed:
            root.addHandler(handler)
        _handlers[:] = installed
        _active = wanted


def _teardown_locked() -> None:
    global _listener, _active
    if _listener is not None:
        _listener.stop()
        for handler in _listener.handlers:
            handler.close()
    _listener = None
    root = logging.getLogger()
    for handler in _handlers:
        root.removeHandler(handler)
    _handlers.clear()
    _active = None


def shutdown_logging() -> None:
    """Flush and remove the ledger's handlers; used at exit and in tests."""

    with _lock:
        _teardown_locked()


def get_logger(name: str | None = None) -> logging.Logger:
    with _lock:
        if _active is None:
            init_logging()
    return logging.getLogger(name or ROOT_LOGGER_NAME)


def set_level(level: str | int) -> None:
    """Change the threshold of every installed handler."""

    new_level = _parse_level(level)
    with _lock:
        for handler in _handlers:
            handler.setLevel(new_level)
        if _listener is not None:
            for handler in _listener.handlers:
                handler.setLevel(new_level)
