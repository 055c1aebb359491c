from decimal import Decimal

import pytest

from salary_ledger.core.formatting import format_amount, format_currency, month_name, period_label


def test_format_amount_drops_integral_decimals() -> None:
    assert format_amount(52000) == "52,000"
    assert format_amount(Decimal("1200.5")) == "1,200.50"


def test_format_currency_handles_negative_values() -> None:
    assert format_currency(Decimal("52000")) == "₹52,000"
    assert format_currency(-1500, symbol="$") == "-$1,500"


def test_month_name_is_zero_based() -> None:
    assert month_name(0) == "January"
    assert month_name(11) == "December"
    assert period_label(2, 2024) == "March 2024"


@pytest.mark.parametrize("month", [-1, 12])
def test_month_name_rejects_out_of_range(month: int) -> None:
    with pytest.raises(ValueError):
        month_name(month)
