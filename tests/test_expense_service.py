from datetime import date
from decimal import Decimal

from statement_engine.schemas.property_settings import PropertySettings
from statement_engine.services.expense_service import (
    check_cleaning_mismatch,
    is_cleaning_expense,
    is_ll_cover_expense,
    is_upsell,
    select_period_expenses,
    summarize_expenses,
)
from statement_engine.services.settings_service import PropertySettingsMap

START = date(2025, 11, 1)
END = date(2025, 11, 30)


def test_select_period_expenses_filters_property_and_date(make_expense):
    expenses = [
        make_expense(),
        make_expense(date=START),
        make_expense(date=END),
        make_expense(date=date(2025, 10, 31)),
        make_expense(date=date(2025, 12, 1)),
        make_expense(property_id=100002),
        make_expense(property_id=None),
    ]
    selected = select_period_expenses(expenses, ["100001"], START, END)
    assert [exp.id for exp in selected] == [expenses[i].id for i in (0, 1, 2, 6)]


def test_expense_classifiers(make_expense):
    assert is_ll_cover_expense(make_expense(description="LL Cover - roof repair"))
    assert is_ll_cover_expense(make_expense(vendor="LLCover Inc"))
    assert is_cleaning_expense(make_expense(category="Cleaning"))
    assert not is_cleaning_expense(make_expense())
    assert is_upsell(make_expense(amount=Decimal("25")))
    assert is_upsell(make_expense(amount=Decimal("-5"), type="upsell"))
    assert not is_upsell(make_expense())


def test_summary_separates_ll_cover_and_upsells(make_expense):
    expenses = [
        make_expense(amount=Decimal("-100")),
        make_expense(amount=Decimal("-250"), description="LL Cover plumbing"),
        make_expense(amount=Decimal("40"), category="Upsell", description="Early check-in"),
    ]
    summary = summarize_expenses(expenses, PropertySettingsMap())

    assert [exp.id for exp in summary.ll_cover_expenses] == [expenses[1].id]
    assert summary.total_expenses == Decimal("100")
    assert summary.total_upsells == Decimal("40")
    assert summary.net_amount == Decimal("-60")


def test_cleaning_costs_dropped_for_pass_through_properties(make_expense):
    expenses = [
        make_expense(property_id=1, amount=Decimal("-150"), category="Cleaning"),
        make_expense(property_id=1, amount=Decimal("-30"), description="Cleaning supplies"),
        make_expense(property_id=2, amount=Decimal("-150"), category="Cleaning"),
        make_expense(property_id=1, amount=Decimal("-80"), category="Maintenance"),
    ]
    settings_map = PropertySettingsMap({1: PropertySettings(cleaning_fee_pass_through=True)})

    summary = summarize_expenses(expenses, settings_map)

    assert [exp.id for exp in summary.expenses] == [expenses[2].id, expenses[3].id]
    assert summary.net_amount == Decimal("-230")


def test_cleaning_mismatch_reported_for_pass_through(make_reservation, make_expense):
    reservations = [make_reservation(property_id=1), make_reservation(property_id=1)]
    expenses = [make_expense(property_id=1, category="Cleaning")]
    settings_map = PropertySettingsMap({1: PropertySettings(cleaning_fee_pass_through=True)})

    warning = check_cleaning_mismatch(reservations, expenses, [1], settings_map)

    assert warning is not None
    assert warning.reservation_count == 2
    assert warning.cleaning_expense_count == 1
    assert warning.difference == 1


def test_no_cleaning_mismatch_when_counts_match(make_reservation, make_expense):
    reservations = [make_reservation(property_id=1)]
    expenses = [make_expense(property_id=1, category="Cleaning")]
    settings_map = PropertySettingsMap({1: PropertySettings(cleaning_fee_pass_through=True)})
    assert check_cleaning_mismatch(reservations, expenses, [1], settings_map) is None


def test_no_cleaning_mismatch_without_pass_through(make_reservation):
    reservations = [make_reservation(property_id=1)]
    assert check_cleaning_mismatch(reservations, [], [1], PropertySettingsMap()) is None


def test_summary_partitions_every_period_expense(make_expense):
    expenses = [
        make_expense(property_id=1, amount=Decimal("-100")),
        make_expense(property_id=1, amount=Decimal("-300"), description="LL Cover roof"),
        make_expense(property_id=1, amount=Decimal("-120"), category="Cleaning"),
        make_expense(property_id=1, amount=Decimal("60"), type="upsell"),
    ]
    settings_map = PropertySettingsMap({1: PropertySettings(cleaning_fee_pass_through=True)})

    summary = summarize_expenses(expenses, settings_map)

    assert [exp.id for exp in summary.expenses] == [expenses[0].id, expenses[3].id]
    assert [exp.id for exp in summary.ll_cover_expenses] == [expenses[1].id]
    assert [exp.id for exp in summary.suppressed_expenses] == [expenses[2].id]
    assert summary.net_amount == Decimal("-40")
