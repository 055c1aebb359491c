"""Tests for the command-line client."""
from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from rich.console import Console

from salary_ledger.cli import main, parse_expense
from salary_ledger.core.config import get_settings
from salary_ledger.core.errors import ValidationError
from salary_ledger.models import Employee


@pytest.fixture()
def run(session_factory, storage):
    """Run the CLI and return ``(exit_code, output)``."""

    def _run(*argv: str) -> tuple[int, str]:
        console = Console(record=True, width=200)
        code = main(list(argv), console=console, session_factory=session_factory, storage=storage)
        return code, console.export_text()

    return _run


def test_parse_expense_converts_month_to_zero_based() -> None:
    expense = parse_expense("Travel:1200:05/03/2024")

    assert expense.category == "Travel"
    assert expense.amount == Decimal("1200")
    assert (expense.expense_day, expense.expense_month, expense.expense_year) == (5, 2, 2024)


def test_parse_expense_defaults_to_today() -> None:
    expense = parse_expense("Food:80.5", today=date(2024, 1, 31))

    assert (expense.expense_day, expense.expense_month, expense.expense_year) == (31, 0, 2024)


@pytest.mark.parametrize("value", ["Travel", ":100", "Travel:abc", "Travel:10:yesterday"])
def test_parse_expense_rejects_malformed_values(value: str) -> None:
    with pytest.raises(ValidationError):
        parse_expense(value)


def test_commands_require_login(run) -> None:
    code, output = run("employees", "list")

    assert code == 1
    assert "Login required" in output


def test_register_persists_login_between_runs(run) -> None:
    code, output = run("register", "--name", "Asha Rao", "--email", "asha@example.com", "--password", "secret1")
    assert code == 0
    assert "Registered and logged in as Asha Rao" in output

    code, output = run("whoami")
    assert code == 0
    assert "asha@example.com" in output

    assert run("logout")[0] == 0
    assert run("whoami")[0] == 1


def test_wrong_password_reports_error(run) -> None:
    run("register", "--name", "Asha Rao", "--email", "asha@example.com", "--password", "secret1")
    run("logout")

    code, output = run("login", "--email", "asha@example.com", "--password", "bad-pass")

    assert code == 1
    assert "Invalid email or password" in output


def test_record_save_and_list(run, session_factory) -> None:
    run("register", "--name", "Asha Rao", "--email", "asha@example.com", "--password", "secret1")
    run("employees", "add", "Meena", "Cook")
    code, output = run("employees", "list")
    assert code == 0
    assert "Meena" in output

    with session_factory() as session:
        employee_id = session.query(Employee).one().id

    code, output = run(
        "records", "save",
        "--employee", employee_id,
        "--month", "3",
        "--year", "2024",
        "--salary", "50000",
        "--expense", "Travel:1200:04/03/2024",
        "--expense", "Food:800:09/03/2024",
    )
    assert code == 0, output
    assert "March 2024" in output
    assert "₹52,000" in output

    code, output = run("records", "list")
    assert code == 0
    assert "Meena" in output
    assert "Subtotal ₹2,000" in output

    code, output = run("employees", "remove", employee_id)
    assert code == 0
    assert "1 salary record(s)" in output


def test_init_db_creates_demo_account_once(run) -> None:
    code, output = run("init-db", "--demo")
    assert code == 0
    assert "Demo account created: demo@example.com" in output

    code, output = run("init-db", "--demo")
    assert code == 0
    assert "already exists" in output

    assert run("login", "--email", "demo@example.com", "--password", "demo123")[0] == 0


@pytest.fixture()
def local_backend(monkeypatch):
    monkeypatch.setenv("AUTH_BACKEND", "local")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_ledger_commands_work_with_local_identity(local_backend, run, session_factory) -> None:
    code, output = run("register", "--name", "Asha Rao", "--email", "asha@example.com", "--password", "secret1")
    assert code == 0, output

    code, output = run("employees", "add", "Meena", "Cook")
    assert code == 0, output
    with session_factory() as session:
        employee_id = session.query(Employee).one().id

    code, output = run(
        "records", "save", "--employee", employee_id, "--month", "1", "--year", "2024", "--salary", "100"
    )
    assert code == 0, output

    code, output = run("records", "list")
    assert code == 0
    assert "January 2024" in output
    assert "₹100" in output


def test_sub_cent_salary_is_reported_not_rounded(run, session_factory) -> None:
    run("register", "--name", "Asha Rao", "--email", "asha@example.com", "--password", "secret1")
    run("employees", "add", "Meena", "Cook")
    with session_factory() as session:
        employee_id = session.query(Employee).one().id

    code, output = run(
        "records", "save", "--employee", employee_id, "--month", "1", "--year", "2024", "--salary", "100.005"
    )

    assert code == 1
    assert "Salary must have at most 2 decimal places" in output
