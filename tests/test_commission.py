from datetime import date
from decimal import Decimal

import pytest

from statement_engine.domain.commission import (
    calculate_commission,
    get_effective_pm_fee,
    is_waiver_active,
    round_currency,
)
from statement_engine.schemas.property_settings import PropertySettings


def test_commission_is_deducted_normally():
    result = calculate_commission(Decimal("1000"), Decimal("15"), is_cohost_airbnb=False, waiver_active=False)
    assert result.pm_fee == Decimal("150")
    assert result.pm_fee_displayed == Decimal("150.00")
    assert result.pm_fee_deducted == Decimal("150")


def test_displayed_fee_is_rounded_half_up():
    result = calculate_commission(Decimal("416.90"), Decimal("15"), is_cohost_airbnb=False, waiver_active=False)
    assert result.pm_fee == Decimal("62.535")
    assert result.pm_fee_displayed == Decimal("62.54")


@pytest.mark.parametrize(
    "is_cohost, waiver",
    [(True, False), (False, True), (True, True)],
)
def test_ghost_fee_is_displayed_but_not_deducted(is_cohost, waiver):
    result = calculate_commission(Decimal("500"), Decimal("15"), is_cohost_airbnb=is_cohost, waiver_active=waiver)
    assert result.pm_fee_displayed == Decimal("75.00")
    assert result.pm_fee_deducted == Decimal("0")


def test_round_currency_rounds_half_away_from_zero():
    assert round_currency(Decimal("0.125")) == Decimal("0.13")
    assert round_currency(Decimal("-0.125")) == Decimal("-0.13")


def test_waiver_inactive_when_not_enabled():
    settings = PropertySettings(waive_commission=False, waive_commission_until=date(2030, 1, 1))
    assert is_waiver_active(settings, date(2025, 6, 30)) is False


def test_waiver_without_end_date_is_indefinite():
    settings = PropertySettings(waive_commission=True)
    assert is_waiver_active(settings, date(2099, 12, 31)) is True


def test_waiver_boundary_is_inclusive():
    settings = PropertySettings(waive_commission=True, waive_commission_until="2025-06-30")
    assert is_waiver_active(settings, date(2025, 6, 30)) is True
    assert is_waiver_active(settings, date(2025, 7, 1)) is False


def test_waiver_active_for_earlier_statement():
    settings = PropertySettings(waive_commission=True, waive_commission_until=date(2025, 6, 30))
    assert is_waiver_active(settings, date(2025, 5, 31)) is True


def test_effective_pm_fee_without_transition_is_base_fee():
    settings = PropertySettings(pm_fee_percentage=Decimal("20"))
    assert get_effective_pm_fee(settings, date(2025, 11, 1)) == Decimal("20")


def test_effective_pm_fee_switches_on_creation_date():
    settings = PropertySettings(
        pm_fee_percentage=Decimal("15"),
        new_pm_fee_enabled=True,
        new_pm_fee_percentage=Decimal("18"),
        new_pm_fee_start_date=date(2025, 10, 1),
    )
    assert get_effective_pm_fee(settings, date(2025, 9, 30)) == Decimal("15")
    assert get_effective_pm_fee(settings, date(2025, 10, 1)) == Decimal("18")
    assert get_effective_pm_fee(settings, None) == Decimal("15")


def test_effective_pm_fee_ignores_incomplete_transition():
    settings = PropertySettings(new_pm_fee_enabled=True, new_pm_fee_percentage=Decimal("18"))
    assert get_effective_pm_fee(settings, date(2025, 10, 1)) == Decimal("15")
