"""Timing helpers to log duration and statement counts of ledger operations."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from time import perf_counter
from typing import Iterator, Optional

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session


_TRANSACTION_CONTROL = ("BEGIN", "COMMIT", "ROLLBACK", "SAVEPOINT", "RELEASE")


class StatementCounter:
    """Count SQL statements issued on the engine behind a session.

    Transaction control statements are not counted.
    """

    def __init__(self) -> None:
        self.call_count = 0
        self._engine: Engine | None = None

    def _on_execute(self, conn, cursor, statement: str, *args) -> None:
        if statement.lstrip().upper().startswith(_TRANSACTION_CONTROL):
            return
        self.call_count += 1

    def attach(self, session: Session) -> None:
        bind = session.get_bind()
        self._engine = bind if isinstance(bind, Engine) else bind.engine
        event.listen(self._engine, "before_cursor_execute", self._on_execute)

    def detach(self) -> None:
        if self._engine is not None:
            event.remove(self._engine, "before_cursor_execute", self._on_execute)
            self._engine = None


@dataclass
class _Timer:
    label: str
    logger: logging.Logger
    level: int
    unit: str
    expected_total: Optional[int]
    count: int = 0
    start: float = field(default_factory=perf_counter)
    counter: Optional[StatementCounter] = None

    def add(self, amount: int = 1) -> None:
        self.count += amount

    def set_total(self, total: int) -> None:
        self.expected_total = total

    @property
    def db_calls(self) -> int:
        return self.counter.call_count if self.counter else 0

    def _resolved_total(self) -> Optional[int]:
        return self.expected_total if self.expected_total is not None else self.count

    def finish(self, success: bool = True) -> None:
        elapsed = perf_counter() - self.start
        total = self._resolved_total()

        if success:
            message = f"{self.label} completed in {elapsed:.3f}s"
            if total:
                message += f" ({total:,} {self.unit})"
            if self.counter is not None:
                message += f" ({self.db_calls:,} DB calls)"
            self.logger.log(self.level, message)
        else:
            fail_message = f"{self.label} failed after {elapsed:.3f}s"
            if self.counter is not None:
                fail_message += f" ({self.db_calls:,} DB calls)"
            self.logger.error(fail_message)


@contextmanager
def timeit(
    label: str,
    *,
    logger: Optional[logging.Logger] = None,
    level: int = logging.DEBUG,
    unit: str = "items",
    total: Optional[int] = None,
    session: Optional[Session] = None,
) -> Iterator[_Timer]:
    """Time a block and log the outcome.

    Args:
        label: Description of the operation being timed
        logger: Logger instance to use (defaults to "salary_ledger.timer")
        level: Logging level for the success message
        unit: Unit used when reporting ``total``/``count``
        total: Expected number of processed items
        session: When given, SQL statements issued through its engine are counted
    """
    log = logger or logging.getLogger("salary_ledger.timer")
    counter: StatementCounter | None = None
    if session is not None:
        counter = StatementCounter()
        counter.attach(session)

    timer = _Timer(
        label=label,
        logger=log,
        level=level,
        unit=unit,
        expected_total=total,
        counter=counter,
    )

    try:
        yield timer
    except Exception:
        timer.finish(success=False)
        raise
    else:
        timer.finish(success=True)
    finally:
        if counter is not None:
            counter.detach()
