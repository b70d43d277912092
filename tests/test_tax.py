from decimal import Decimal

import pytest

from statement_engine.domain.tax import calculate_tax_to_add, should_add_tax


@pytest.mark.parametrize(
    "is_airbnb, pass_through, disregard, expected",
    [
        (False, False, False, True),
        (False, True, False, True),
        (True, False, False, False),
        (True, True, False, True),
        (False, False, True, False),
        (False, True, True, False),
        (True, False, True, False),
        (True, True, True, False),
    ],
)
def test_should_add_tax_truth_table(is_airbnb, pass_through, disregard, expected):
    assert should_add_tax(is_airbnb, pass_through, disregard) is expected


def test_calculate_tax_to_add_returns_amount_when_added():
    assert calculate_tax_to_add(Decimal("80"), False, False, False) == Decimal("80")


def test_calculate_tax_to_add_returns_zero_when_not_added():
    assert calculate_tax_to_add(Decimal("80"), True, False, False) == Decimal("0")
    assert calculate_tax_to_add(Decimal("80"), False, False, True) == Decimal("0")


def test_missing_tax_amount_is_zero():
    assert calculate_tax_to_add(None, False, False, False) == Decimal("0")


def test_truthy_flags_are_honoured():
    assert should_add_tax(True, 1, 0) is True
    assert should_add_tax(False, None, 1) is False
