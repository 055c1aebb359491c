"""Tests for the salary-record upsert and listing."""
from __future__ import annotations

from decimal import Decimal

import pytest

from salary_ledger.core.errors import NotFoundError, ValidationError
from salary_ledger.core.log.timing import StatementCounter
from salary_ledger.domain import ExpenseInput
from salary_ledger.models import Expense, SalaryRecord
from salary_ledger.repositories import SalaryRecordRepository
from salary_ledger.services import EmployeeService, LocalIdentityBackend, SalaryRecordService


def _expense(category: str, amount: str, day: int = 10, month: int = 2, year: int = 2024) -> ExpenseInput:
    return ExpenseInput(
        category=category,
        amount=Decimal(amount),
        expense_day=day,
        expense_month=month,
        expense_year=year,
    )


def _count(session, model) -> int:
    return session.query(model).count()


def test_second_upsert_replaces_salary_and_expenses(session, owner, employee) -> None:
    """Saving the same period twice keeps one record with the latest values."""

    service = SalaryRecordService(session)
    first = service.upsert_salary_record(
        owner.id, employee.id, 2, 2024, "50000", [_expense("Travel", "1200"), _expense("Food", "800")]
    )
    second = service.upsert_salary_record(
        owner.id, employee.id, 2, 2024, Decimal("52000"), [_expense("Bonus", "500")]
    )

    assert second.id == first.id
    assert second.salary == Decimal("52000")
    assert [line.category for line in second.expenses] == ["Bonus"]
    assert second.grand_total == Decimal("52500")
    assert _count(session, SalaryRecord) == 1
    assert _count(session, Expense) == 1


def test_upsert_with_no_expenses_clears_existing_ones(session, owner, employee) -> None:
    service = SalaryRecordService(session)
    service.upsert_salary_record(owner.id, employee.id, 0, 2024, 40000, [_expense("Fuel", "300")])

    record = service.upsert_salary_record(owner.id, employee.id, 0, 2024, 40000)

    assert record.expenses == ()
    assert record.grand_total == Decimal("40000")
    assert _count(session, Expense) == 0


def test_list_orders_by_year_then_month_descending(session, owner, employee) -> None:
    service = SalaryRecordService(session)
    service.upsert_salary_record(owner.id, employee.id, 11, 2023, 1000)
    service.upsert_salary_record(owner.id, employee.id, 2, 2024, 2000, [_expense("Travel", "150")])
    service.upsert_salary_record(owner.id, employee.id, 0, 2024, 3000)

    records = service.list_salary_records(owner.id)

    assert [(record.month, record.year) for record in records] == [(2, 2024), (0, 2024), (11, 2023)]
    assert records[0].period_label == "March 2024"
    assert records[0].grand_total == Decimal("2150")
    assert records[1].expenses == ()


def test_list_fetches_expenses_in_one_batch(session_factory, owner, employee) -> None:
    with session_factory() as session:
        service = SalaryRecordService(session)
        for month in range(4):
            service.upsert_salary_record(
                owner.id, employee.id, month, 2024, 1000, [_expense("Travel", "10"), _expense("Food", "5")]
            )

    with session_factory() as session:
        counter = StatementCounter()
        counter.attach(session)
        try:
            records = SalaryRecordService(session).list_salary_records(owner.id)
        finally:
            counter.detach()

    assert len(records) == 4
    assert all(len(record.expenses) == 2 for record in records)
    assert counter.call_count == 2


def test_records_are_scoped_to_their_owner(session, owner, other_owner, employee) -> None:
    service = SalaryRecordService(session)
    service.upsert_salary_record(owner.id, employee.id, 5, 2024, 1000)

    assert service.list_salary_records(other_owner.id) == []
    with pytest.raises(NotFoundError):
        service.upsert_salary_record(other_owner.id, employee.id, 5, 2024, 99)


def test_unknown_employee_is_rejected(session, owner) -> None:
    with pytest.raises(NotFoundError, match="Employee not found"):
        SalaryRecordService(session).upsert_salary_record(owner.id, "missing", 1, 2024, 10)


@pytest.mark.parametrize(
    ("salary", "expenses", "message"),
    [
        ("-1", [], "Salary must not be negative"),
        ("abc", [], "Please enter a valid salary"),
        ("100", [_expense("Travel", "-5")], "Amount must not be negative"),
        ("100", [_expense("", "5")], "category"),
    ],
)
def test_invalid_amounts_are_rejected_before_writing(session, owner, employee, salary, expenses, message) -> None:
    with pytest.raises(ValidationError, match=message):
        SalaryRecordService(session).upsert_salary_record(owner.id, employee.id, 1, 2024, salary, expenses)

    assert _count(session, SalaryRecord) == 0


def test_month_outside_zero_to_eleven_is_rejected(session, owner, employee) -> None:
    with pytest.raises(ValidationError):
        SalaryRecordService(session).upsert_salary_record(owner.id, employee.id, 12, 2024, 100)


def test_concurrent_insert_falls_back_to_update(session_factory, owner, employee, monkeypatch) -> None:
    """A unique-key collision on insert turns into an update of the existing row."""

    with session_factory() as session:
        existing = SalaryRecordService(session).upsert_salary_record(
            owner.id, employee.id, 3, 2024, 1000, [_expense("Travel", "10")]
        )

    original = SalaryRecordRepository.find_by_period
    calls = {"count": 0}

    def _stale_first_lookup(self, *args, **kwargs):
        calls["count"] += 1
        if calls["count"] == 1:
            return None
        return original(self, *args, **kwargs)

    monkeypatch.setattr(SalaryRecordRepository, "find_by_period", _stale_first_lookup)

    with session_factory() as session:
        record = SalaryRecordService(session).upsert_salary_record(
            owner.id, employee.id, 3, 2024, 2000, [_expense("Food", "20")]
        )

    with session_factory() as session:
        assert _count(session, SalaryRecord) == 1
        assert [expense.category for expense in session.query(Expense)] == ["Food"]

    assert record.id == existing.id
    assert record.salary == Decimal("2000")
    assert calls["count"] == 2


def test_deleting_employee_removes_its_records(session, owner, employee) -> None:
    records = SalaryRecordService(session)
    records.upsert_salary_record(owner.id, employee.id, 1, 2024, 1000, [_expense("Travel", "10")])
    records.upsert_salary_record(owner.id, employee.id, 2, 2024, 1000)

    removed = EmployeeService(session).delete_employee(owner.id, employee.id)

    assert removed == 2
    assert records.list_salary_records(owner.id) == []
    assert _count(session, Expense) == 0


def test_resave_without_expenses_leaves_salary_only(session, owner, employee) -> None:
    service = SalaryRecordService(session)
    service.upsert_salary_record(owner.id, employee.id, 3, 2024, 50000, [_expense("Fuel", "1200", day=5, month=3)])

    record = service.upsert_salary_record(owner.id, employee.id, 3, 2024, 52000, [])

    assert record.salary == Decimal("52000")
    assert record.expenses == ()
    assert record.grand_total == Decimal("52000")
    assert [listed.grand_total for listed in service.list_salary_records(owner.id)] == [Decimal("52000")]


def test_local_identity_users_can_keep_a_ledger(session, storage) -> None:
    """Profiles from the local backend own employees and records like database users."""

    user = LocalIdentityBackend(storage).register("Asha Rao", "asha@example.com", "secret1")
    employee = EmployeeService(session).create_employee(user.id, "Meena", "Cook")
    service = SalaryRecordService(session)

    saved = service.upsert_salary_record(user.id, employee.id, 3, 2024, 50000, [_expense("Fuel", "1200")])

    assert service.list_salary_records(user.id) == [saved]
    assert saved.grand_total == Decimal("51200")
    assert EmployeeService(session).delete_employee(user.id, employee.id) == 1


@pytest.mark.parametrize(
    ("salary", "message"),
    [
        ("100.005", "Salary must have at most 2 decimal places"),
        ("10000000000", "Salary must be less than 10,000,000,000"),
    ],
)
def test_amounts_the_store_cannot_hold_exactly_are_rejected(session, owner, employee, salary, message) -> None:
    with pytest.raises(ValidationError, match=message):
        SalaryRecordService(session).upsert_salary_record(owner.id, employee.id, 1, 2024, salary)

    assert _count(session, SalaryRecord) == 0


def test_saved_amounts_match_listed_amounts(session_factory, owner, employee) -> None:
    with session_factory() as session:
        saved = SalaryRecordService(session).upsert_salary_record(
            owner.id, employee.id, 1, 2024, "9999999999.99", [_expense("Travel", "0.1")]
        )

    with session_factory() as session:
        (listed,) = SalaryRecordService(session).list_salary_records(owner.id)

    assert saved.salary == Decimal("9999999999.99")
    assert listed.salary == saved.salary
    assert listed.expenses[0].amount == saved.expenses[0].amount == Decimal("0.10")
    assert listed.grand_total == saved.grand_total
