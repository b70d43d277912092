from decimal import Decimal

import pytest

from statement_engine.domain.cleaning_fee import (
    forward_cleaning_fee,
    max_reversal_error,
    reverse_cleaning_fee,
)


@pytest.mark.parametrize(
    "guest_paid, pm, expected",
    [
        ("350", "20", "241.67"),
        ("235", "20", "145.83"),
        ("300", "20", "200.00"),
        ("349.80", "20", "241.50"),
        ("255", "10", "181.82"),
        ("255", "15", "171.74"),
        ("395", "25", "266.00"),
        ("200", "0", "150.00"),
        ("400", "100", "150.00"),
    ],
)
def test_reverse_cleaning_fee(guest_paid, pm, expected):
    assert reverse_cleaning_fee(Decimal(guest_paid), Decimal(pm)) == Decimal(expected)


@pytest.mark.parametrize("guest_paid", ["0", "-100", "50", "60"])
def test_reverse_cleaning_fee_never_negative(guest_paid):
    assert reverse_cleaning_fee(Decimal(guest_paid), Decimal("20")) == Decimal("0")


def test_reverse_cleaning_fee_requires_pass_through():
    assert reverse_cleaning_fee(Decimal("350"), Decimal("20"), cleaning_fee_pass_through=False) == Decimal("0")


def test_reverse_cleaning_fee_of_missing_amount_is_zero():
    assert reverse_cleaning_fee(None, Decimal("20")) == Decimal("0")


def test_forward_cleaning_fee_rounds_up_to_five():
    # (200 + 50) * 1.2 = 300 exactly, (198.45 + 50) * 1.2 = 298.14 -> 300
    assert forward_cleaning_fee(Decimal("200"), Decimal("20")) == Decimal("300")
    assert forward_cleaning_fee(Decimal("198.45"), Decimal("20")) == Decimal("300")


@pytest.mark.parametrize("pm", ["0", "10", "15", "20", "25", "50"])
@pytest.mark.parametrize("actual", ["0", "75", "141.75", "157.50", "198.45", "241.50", "300"])
def test_round_trip_error_is_bounded(actual, pm):
    # The forward formula rounds up to the next $5, so the reconstructed fee
    # may overshoot by up to 5 / (1 + pm%) (plus half a cent of rounding).
    actual_fee = Decimal(actual)
    guest_paid = forward_cleaning_fee(actual_fee, Decimal(pm))
    recovered = reverse_cleaning_fee(guest_paid, Decimal(pm))

    assert recovered >= actual_fee
    assert recovered - actual_fee <= max_reversal_error(Decimal(pm)) + Decimal("0.005")


def test_max_reversal_error_at_twenty_percent():
    assert max_reversal_error(Decimal("20")).quantize(Decimal("0.01")) == Decimal("4.17")
