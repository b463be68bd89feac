"""Tests for lenient amount parsing."""

from decimal import Decimal

import pytest

from app.core.money import to_amount


@pytest.mark.parametrize(
    "value,expected",
    [
        (1500, Decimal("1500.00")),
        ("2500.5", Decimal("2500.50")),
        ("1,25,000", Decimal("125000.00")),
        (" 99 ", Decimal("99.00")),
        (Decimal("10.005"), Decimal("10.00")),
        (12.25, Decimal("12.25")),
    ],
)
def test_parses_numbers(value, expected) -> None:
    assert to_amount(value) == expected


@pytest.mark.parametrize("value", [None, "", "   ", "abc", "NaN", "inf", float("nan"), True, [], {}])
def test_garbage_is_zero(value) -> None:
    assert to_amount(value) == Decimal("0")
