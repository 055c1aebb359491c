"""Tests for the log context and the statement-counting timer."""
from __future__ import annotations

import logging

import pytest
from sqlalchemy import text

from salary_ledger.core.log.context import ContextFilter, log_context
from salary_ledger.core.log.timing import timeit


def _record() -> logging.LogRecord:
    return logging.LogRecord("test", logging.INFO, __file__, 1, "hello", None, None)


def test_scoped_context_is_reset_after_block() -> None:
    log_context.clear()
    with log_context.scoped(user_id="u1", path="/employees"):
        record = _record()
        ContextFilter().filter(record)
        assert record.context == "user_id=u1 path=/employees "

    assert log_context.as_dict() == {}


def test_unbind_removes_single_key() -> None:
    log_context.clear()
    log_context.bind(user_id="u1", request="r1")
    log_context.unbind("user_id")

    assert log_context.as_dict() == {"request": "r1"}
    log_context.clear()


def test_timeit_counts_statements_and_reports_failures(session, caplog) -> None:
    logger = logging.getLogger("salary_ledger.tests.timer")
    caplog.set_level(logging.DEBUG, logger=logger.name)

    with timeit("Two queries", logger=logger, session=session) as timer:
        session.execute(text("SELECT 1"))
        session.execute(text("SELECT 2"))
    assert timer.db_calls == 2

    with pytest.raises(RuntimeError):
        with timeit("Broken", logger=logger):
            raise RuntimeError("boom")

    messages = [record.getMessage() for record in caplog.records]
    assert any("Two queries completed" in message and "(2 DB calls)" in message for message in messages)
    assert any(message.startswith("Broken failed after") for message in messages)
