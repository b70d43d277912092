"""Expense selection and classification for a statement."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from statement_engine.schemas.reservation import Expense, Reservation
from statement_engine.schemas.statement import CleaningMismatchWarning
from statement_engine.services.settings_service import PropertySettingsMap
from statement_engine.utils.validators import coerce_property_id

LL_COVER_MARKERS = ("ll cover", "llcover")


@dataclass(frozen=True)
class ExpenseSummary:
    """Expenses that count toward a statement and their totals."""

    expenses: list[Expense] = field(default_factory=list)
    ll_cover_expenses: list[Expense] = field(default_factory=list)
    suppressed_expenses: list[Expense] = field(default_factory=list)
    total_expenses: Decimal = Decimal("0")
    total_upsells: Decimal = Decimal("0")

    @property
    def net_amount(self) -> Decimal:
        """Signed sum of the counted expenses (upsells minus costs)."""
        return sum((exp.amount for exp in self.expenses), Decimal("0"))


def _text_fields(expense: Expense) -> tuple[str, str, str, str]:
    return (
        expense.description.lower(),
        expense.vendor.lower(),
        expense.category.lower(),
        expense.type.lower(),
    )


def is_ll_cover_expense(expense: Expense) -> bool:
    description, vendor, category, _ = _text_fields(expense)
    return any(marker in text for text in (description, vendor, category) for marker in LL_COVER_MARKERS)


def is_cleaning_expense(expense: Expense) -> bool:
    description, _, category, type_ = _text_fields(expense)
    return any("cleaning" in text for text in (category, type_, description))


def is_cleaning_or_supplies_expense(expense: Expense) -> bool:
    description, _, category, type_ = _text_fields(expense)
    return is_cleaning_expense(expense) or any("supplies" in text for text in (category, type_, description))


def is_upsell(expense: Expense) -> bool:
    return expense.amount > 0 or expense.type.lower() == "upsell" or expense.category.lower() == "upsell"


def select_period_expenses(
    expenses: Iterable[Expense],
    property_ids: Sequence[object],
    start: date,
    end: date,
) -> list[Expense]:
    """Expenses of the statement properties dated inside the period.

    Expenses without a property id belong to every property.
    """
    wanted = {coerce_property_id(pid) for pid in property_ids}
    return [
        exp
        for exp in expenses
        if (exp.property_id is None or coerce_property_id(exp.property_id) in wanted)
        and start <= exp.date <= end
    ]


def summarize_expenses(
    period_expenses: Iterable[Expense],
    settings_map: PropertySettingsMap,
) -> ExpenseSummary:
    """Classify period expenses and total them.

    LL Cover items are reported separately and never reduce the payout.
    Cleaning and supplies costs are dropped for properties with cleaning
    pass-through, since the reconstructed cleaning cost is already deducted
    per reservation.

    Args:
        period_expenses: Output of ``select_period_expenses``
        settings_map: Per-property settings

    Returns:
        ExpenseSummary: Counted, LL Cover and suppressed expenses (a
            partition of ``period_expenses``) and totals
    """
    counted: list[Expense] = []
    ll_cover: list[Expense] = []
    suppressed: list[Expense] = []
    total_expenses = Decimal("0")
    total_upsells = Decimal("0")

    for exp in period_expenses:
        if is_ll_cover_expense(exp):
            ll_cover.append(exp)
            continue

        if (
            exp.property_id is not None
            and is_cleaning_or_supplies_expense(exp)
            and settings_map.for_property(exp.property_id).cleaning_fee_pass_through
        ):
            suppressed.append(exp)
            continue

        counted.append(exp)
        if is_upsell(exp):
            total_upsells += exp.amount
        else:
            total_expenses += abs(exp.amount)

    return ExpenseSummary(
        expenses=counted,
        ll_cover_expenses=ll_cover,
        suppressed_expenses=suppressed,
        total_expenses=total_expenses,
        total_upsells=total_upsells,
    )


def check_cleaning_mismatch(
    reservations: Sequence[Reservation],
    expenses: Sequence[Expense],
    property_ids: Sequence[object],
    settings_map: PropertySettingsMap,
) -> CleaningMismatchWarning | None:
    """Warn when pass-through properties have a cleaning expense count that differs from their stays.

    ``expenses`` is the period expense list before pass-through suppression.
    """
    pass_through_ids = {
        coerce_property_id(pid)
        for pid in property_ids
        if settings_map.for_property(pid).cleaning_fee_pass_through
    }
    if not pass_through_ids:
        return None

    reservation_count = sum(1 for res in reservations if res.property_id in pass_through_ids)
    cleaning_count = sum(
        1
        for exp in expenses
        if exp.property_id is not None
        and coerce_property_id(exp.property_id) in pass_through_ids
        and is_cleaning_expense(exp)
        and not is_ll_cover_expense(exp)
    )

    if reservation_count == 0 or cleaning_count == reservation_count:
        return None

    return CleaningMismatchWarning(
        message=(
            f"Cleaning expense count ({cleaning_count}) does not match "
            f"reservation count ({reservation_count})"
        ),
        reservation_count=reservation_count,
        cleaning_expense_count=cleaning_count,
        difference=reservation_count - cleaning_count,
    )
