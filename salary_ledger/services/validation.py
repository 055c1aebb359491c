"""Input checks applied before any store call."""
from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Iterable, Mapping

from salary_ledger.core.errors import ValidationError
from salary_ledger.domain import ExpenseInput

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6
# Amounts are stored as NUMERIC(12, 2).
AMOUNT_INTEGER_DIGITS = 10
CENTS = Decimal("0.01")


def validate_registration(name: str, email: str, password: str) -> None:
    if not name or not email or not password:
        raise ValidationError("All fields are required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Please enter a valid email address")


def validate_login(email: str, password: str) -> None:
    if not email or not password:
        raise ValidationError("Email and password are required")


def validate_employee_fields(name: str, position: str) -> tuple[str, str]:
    """Return ``(name, position)`` stripped of surrounding whitespace."""

    name = (name or "").strip()
    position = (position or "").strip()
    if not name or not position:
        raise ValidationError("Please fill in all fields")
    return name, position


def validate_month(month: int, *, field: str = "month") -> int:
    if isinstance(month, bool) or not isinstance(month, int) or not 0 <= month <= 11:
        raise ValidationError(f"{field} must be an integer between 0 and 11")
    return month


def validate_year(year: int, *, field: str = "year") -> int:
    if isinstance(year, bool) or not isinstance(year, int) or not 1 <= year <= 9999:
        raise ValidationError(f"{field} must be a valid year")
    return year


def to_amount(value: object, *, field: str) -> Decimal:
    """Coerce ``value`` to a non-negative ``Decimal`` in whole cents.

    Values the store would have to round or could not hold are rejected.
    """

    if isinstance(value, bool) or value is None:
        raise ValidationError(f"Please enter a valid {field}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"Please enter a valid {field}") from exc
    if not amount.is_finite():
        raise ValidationError(f"Please enter a valid {field}")
    if amount < 0:
        raise ValidationError(f"{field.capitalize()} must not be negative")
    if amount.adjusted() >= AMOUNT_INTEGER_DIGITS:
        raise ValidationError(f"{field.capitalize()} must be less than 10,000,000,000")
    if amount != amount.quantize(CENTS):
        raise ValidationError(f"{field.capitalize()} must have at most 2 decimal places")
    return amount.quantize(CENTS)


def normalize_expenses(
    expenses: Iterable[ExpenseInput | Mapping[str, object]],
) -> tuple[ExpenseInput, ...]:
    """Validate submitted expense lines and return them as ``ExpenseInput``."""

    normalized: list[ExpenseInput] = []
    for item in expenses:
        data = _as_mapping(item)
        category = str(data.get("category") or "").strip()
        if not category:
            raise ValidationError("Please enter a custom category name")
        day = data.get("expense_day")
        if isinstance(day, bool) or not isinstance(day, int) or not 1 <= day <= 31:
            raise ValidationError("expense_day must be an integer between 1 and 31")
        normalized.append(
            ExpenseInput(
                category=category,
                amount=to_amount(data.get("amount"), field="amount"),
                expense_day=day,
                expense_month=validate_month(data.get("expense_month"), field="expense_month"),  # type: ignore[arg-type]
                expense_year=validate_year(data.get("expense_year"), field="expense_year"),  # type: ignore[arg-type]
            )
        )
    return tuple(normalized)


def _as_mapping(item: ExpenseInput | Mapping[str, object]) -> Mapping[str, object]:
    if isinstance(item, ExpenseInput):
        return {
            "category": item.category,
            "amount": item.amount,
            "expense_day": item.expense_day,
            "expense_month": item.expense_month,
            "expense_year": item.expense_year,
        }
    return item
