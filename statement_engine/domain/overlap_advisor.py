"""Occupancy overlap advisor.

Checkout accounting silently reports $0 for a period in which a guest was
in residence but did not check out. The advisor compares true occupancy
overlap (independent of the accounting mode) with the reservations the
statement reports on and raises an advisory flag.
"""

from collections.abc import Iterable, Sequence
from datetime import date

from statement_engine.domain.period_filter import (
    CHECKOUT,
    belongs_to_property,
    is_allowed_status,
    overlaps_period,
)
from statement_engine.schemas.reservation import Expense, Reservation


def find_overlapping_reservations(
    reservations: Iterable[Reservation],
    property_id: object,
    start: date,
    end: date,
) -> list[Reservation]:
    """All active stays of a property that intersect the period, whatever the mode."""
    return [
        res
        for res in reservations
        if belongs_to_property(res, property_id)
        and is_allowed_status(res.status)
        and overlaps_period(res, start, end)
    ]


def should_convert_to_calendar(
    mode: str,
    period_reservations: Sequence[Reservation],
    overlapping: Sequence[Reservation],
    start: date,
    end: date,
) -> bool:
    """Decide whether the statement should carry a calendar-conversion flag.

    Args:
        mode: Statement calculation type
        period_reservations: Reservations selected by the period filter
        overlapping: Reservations from ``find_overlapping_reservations``
        start: First day of the period
        end: Last day of the period

    Returns:
        bool: checkout mode - occupancy exists but no checkout landed in the
            period; calendar mode - some stay extends past either boundary
    """
    if mode == CHECKOUT:
        return len(overlapping) > 0 and len(period_reservations) == 0

    return any(res.check_in < start or res.check_out > end for res in overlapping)


def generate_calendar_notice(mode: str, overlapping: Sequence[Reservation]) -> str:
    """Human-readable explanation attached to a flagged statement."""
    if mode == CHECKOUT:
        return (
            f"This property has {len(overlapping)} reservation(s) during this period but no checkouts. "
            "Revenue shows $0 because checkout-based calculation is selected. "
            "Consider converting to calendar-based calculation to see prorated revenue."
        )
    return (
        "This property has long-stay reservation(s) spanning beyond the statement period. "
        "Prorated calendar calculation is applied."
    )


def should_skip_statement(overlapping: Sequence[Reservation], expenses: Sequence[Expense]) -> bool:
    """No occupancy and no expenses: the statement is not generated at all."""
    return len(overlapping) == 0 and len(expenses) == 0
