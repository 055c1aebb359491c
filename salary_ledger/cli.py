"""Command-line client for the salary ledger.

The logged-in profile is kept in local storage, so ``login`` in one
invocation is remembered by the next until ``logout``. Months are entered
as 1-12 on the command line and stored zero based.
"""
from __future__ import annotations

import argparse
from dataclasses import dataclass
from datetime import date
from typing import Callable, Sequence

from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table
from sqlalchemy.orm import sessionmaker

from salary_ledger import __version__
from salary_ledger.core.config import get_settings
from salary_ledger.core.errors import DuplicateEmail, LedgerError, ValidationError
from salary_ledger.core.formatting import format_currency, month_name
from salary_ledger.core.logger import get_logger, init_logging, set_level
from salary_ledger.db.schema import create_schema
from salary_ledger.db.session import get_default_sessionmaker
from salary_ledger.domain import ExpenseInput, SalaryRecordWithExpenses
from salary_ledger.services import (
    AuthSession,
    EmployeeService,
    IdentityBackend,
    LocalSessionStore,
    SalaryRecordService,
    build_identity_backend,
)
from salary_ledger.services.validation import to_amount
from salary_ledger.storage import LocalStorage

LOGGER = get_logger(__name__)

DEMO_NAME = "Demo User"
DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "demo123"


@dataclass
class CliContext:
    console: Console
    auth: AuthSession
    identity: IdentityBackend
    session_factory: sessionmaker


def parse_expense(value: str, *, today: date | None = None) -> ExpenseInput:
    """Parse ``CATEGORY:AMOUNT[:DAY/MONTH/YEAR]``; the date defaults to today."""

    parts = value.split(":")
    if len(parts) not in (2, 3) or not parts[0].strip():
        raise ValidationError(f"Expense {value!r} must look like CATEGORY:AMOUNT[:DD/MM/YYYY]")
    category, amount = parts[0].strip(), parts[1].strip()
    when = today or date.today()
    day, month, year = when.day, when.month, when.year
    if len(parts) == 3:
        try:
            day, month, year = (int(piece) for piece in parts[2].split("/"))
        except ValueError as exc:
            raise ValidationError(f"Expense date {parts[2]!r} must be DD/MM/YYYY") from exc
    return ExpenseInput(
        category=category,
        amount=to_amount(amount, field="amount"),
        expense_day=day,
        expense_month=month - 1,
        expense_year=year,
    )


def _cmd_init_db(ctx: CliContext, args: argparse.Namespace) -> int:
    with ctx.session_factory() as session:
        create_schema(session.get_bind())
    ctx.console.print("[green]Database schema ready[/green]")
    if args.demo:
        try:
            ctx.identity.register(DEMO_NAME, DEMO_EMAIL, DEMO_PASSWORD)
        except DuplicateEmail:
            ctx.console.print(f"Demo account {DEMO_EMAIL} already exists")
        else:
            ctx.console.print(f"Demo account created: {DEMO_EMAIL} / {DEMO_PASSWORD}")
    return 0


def _password(args: argparse.Namespace) -> str:
    return args.password or Prompt.ask("Password", password=True)


def _cmd_register(ctx: CliContext, args: argparse.Namespace) -> int:
    user = ctx.auth.register(args.name, args.email, _password(args))
    ctx.console.print(f"[green]Registered and logged in as {user.name} <{user.email}>[/green]")
    return 0


def _cmd_login(ctx: CliContext, args: argparse.Namespace) -> int:
    user = ctx.auth.login(args.email, _password(args))
    ctx.console.print(f"[green]Logged in as {user.name} <{user.email}>[/green]")
    return 0


def _cmd_logout(ctx: CliContext, args: argparse.Namespace) -> int:
    ctx.auth.logout()
    ctx.console.print("Logged out")
    return 0


def _cmd_whoami(ctx: CliContext, args: argparse.Namespace) -> int:
    user = ctx.auth.current_user
    if user is None:
        ctx.console.print("Not logged in")
        return 1
    ctx.console.print(f"{user.name} <{user.email}> (id {user.id})")
    return 0


def _cmd_employees(ctx: CliContext, args: argparse.Namespace) -> int:
    user = ctx.auth.require_user()
    with ctx.session_factory() as session:
        service = EmployeeService(session)
        if args.action == "add":
            employee = service.create_employee(user.id, args.name, args.position)
            ctx.console.print(f"Added {employee.name} ({employee.position}) id={employee.id}")
        elif args.action == "edit":
            employee = service.update_employee(user.id, args.id, args.name, args.position)
            ctx.console.print(f"Updated {employee.name} ({employee.position})")
        elif args.action == "remove":
            removed = service.delete_employee(user.id, args.id)
            ctx.console.print(f"Employee removed along with {removed} salary record(s)")
        else:
            table = Table(title="Employees")
            table.add_column("ID", style="dim")
            table.add_column("Name")
            table.add_column("Position")
            for employee in service.list_employees(user.id):
                table.add_row(employee.id, employee.name, employee.position)
            ctx.console.print(table)
    return 0


def _records_table(records: Sequence[SalaryRecordWithExpenses], names: dict[str, str]) -> Table:
    table = Table(title="Salary records")
    table.add_column("Employee")
    table.add_column("Period")
    table.add_column("Salary", justify="right")
    table.add_column("Expenses")
    table.add_column("Grand total", justify="right", style="bold")
    for record in records:
        lines = [
            f"{expense.category} {format_currency(expense.amount)} "
            f"({expense.expense_day} {month_name(expense.expense_month)[:3]} {expense.expense_year})"
            for expense in record.expenses
        ]
        if record.expenses:
            lines.append(f"Subtotal {format_currency(record.expenses_total)}")
        table.add_row(
            names.get(record.employee_id, "Unknown"),
            record.period_label,
            format_currency(record.salary),
            "\n".join(lines) or "-",
            format_currency(record.grand_total),
        )
    return table


def _cmd_records(ctx: CliContext, args: argparse.Namespace) -> int:
    user = ctx.auth.require_user()
    with ctx.session_factory() as session:
        service = SalaryRecordService(session)
        if args.action == "save":
            record = service.upsert_salary_record(
                user.id,
                args.employee,
                args.month - 1,
                args.year,
                args.salary,
                [parse_expense(item) for item in args.expense],
            )
            ctx.console.print(
                f"Saved {record.period_label}: salary {format_currency(record.salary)}, "
                f"grand total {format_currency(record.grand_total)}"
            )
            return 0

        names = {employee.id: employee.name for employee in EmployeeService(session).list_employees(user.id)}
        records = service.list_salary_records(user.id)
        ctx.console.print(_records_table(records, names))
    return 0


def _cmd_serve(ctx: CliContext, args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("salary_ledger.main:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="salary-ledger", description="Salary and expense ledger")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    commands = parser.add_subparsers(dest="command", required=True)

    init_db = commands.add_parser("init-db", help="Create database tables")
    init_db.add_argument("--demo", action="store_true", help=f"Also create {DEMO_EMAIL}")
    init_db.set_defaults(handler=_cmd_init_db)

    register = commands.add_parser("register", help="Create an account and log in")
    register.add_argument("--name", required=True)
    register.add_argument("--email", required=True)
    register.add_argument("--password", help="Prompted for when omitted")
    register.set_defaults(handler=_cmd_register)

    login = commands.add_parser("login", help="Log in with email and password")
    login.add_argument("--email", required=True)
    login.add_argument("--password", help="Prompted for when omitted")
    login.set_defaults(handler=_cmd_login)

    commands.add_parser("logout", help="Forget the logged-in user").set_defaults(handler=_cmd_logout)
    commands.add_parser("whoami", help="Show the logged-in user").set_defaults(handler=_cmd_whoami)

    employees = commands.add_parser("employees", help="Manage employees")
    employee_actions = employees.add_subparsers(dest="action", required=True)
    employee_actions.add_parser("list")
    add = employee_actions.add_parser("add")
    add.add_argument("name")
    add.add_argument("position")
    edit = employee_actions.add_parser("edit")
    edit.add_argument("id")
    edit.add_argument("name")
    edit.add_argument("position")
    remove = employee_actions.add_parser("remove", help="Also removes the employee's salary records")
    remove.add_argument("id")
    employees.set_defaults(handler=_cmd_employees)

    records = commands.add_parser("records", help="List or save salary records")
    record_actions = records.add_subparsers(dest="action", required=True)
    record_actions.add_parser("list")
    save = record_actions.add_parser("save", help="Create or replace the record for a month")
    save.add_argument("--employee", required=True, help="Employee id")
    save.add_argument("--month", type=int, required=True, choices=range(1, 13), metavar="1-12")
    save.add_argument("--year", type=int, required=True)
    save.add_argument("--salary", required=True)
    save.add_argument(
        "--expense",
        action="append",
        default=[],
        metavar="CATEGORY:AMOUNT[:DD/MM/YYYY]",
        help="Repeat for several expenses; replaces all existing expenses of the month",
    )
    records.set_defaults(handler=_cmd_records)

    serve = commands.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--reload", action="store_true")
    serve.set_defaults(handler=_cmd_serve)
    return parser


def main(
    argv: Sequence[str] | None = None,
    *,
    console: Console | None = None,
    session_factory: sessionmaker | None = None,
    storage: LocalStorage | None = None,
) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    init_logging(settings.logging)
    if args.verbose:
        set_level("DEBUG")

    console = console or Console()
    storage = storage or LocalStorage(settings.auth.local_storage_path)
    factory = session_factory or get_default_sessionmaker()
    identity = build_identity_backend(settings.auth, session_factory=factory, storage=storage)
    ctx = CliContext(
        console=console,
        auth=AuthSession(identity, LocalSessionStore(storage)),
        identity=identity,
        session_factory=factory,
    )

    handler: Callable[[CliContext, argparse.Namespace], int] = args.handler
    try:
        return handler(ctx, args)
    except LedgerError as exc:
        LOGGER.debug("Command %s failed: %s", args.command, exc.message)
        console.print(f"[red]{exc.message}[/red]")
        return 1


__all__ = ["build_parser", "main", "parse_expense"]
