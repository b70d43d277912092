"""Reservation selection for a statement period.

Two attribution conventions:
- checkout: a stay belongs to the period containing its checkout date
  (start <= check_out <= end)
- calendar: a stay belongs to every period it overlaps, using the
  half-open test check_in <= end and check_out > start

Calendar-mode stays are prorated by the nights that fall inside the period.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from statement_engine.config import settings
from statement_engine.schemas.reservation import Reservation
from statement_engine.utils.validators import coerce_property_id

CHECKOUT = "checkout"
CALENDAR = "calendar"


def is_allowed_status(status: str | None) -> bool:
    return (status or "").lower() in settings.allowed_reservation_statuses


def overlaps_period(reservation: Reservation, start: date, end: date) -> bool:
    """Half-open overlap: checking out on ``start`` does not overlap, checking in on ``end`` does."""
    return reservation.check_in <= end and reservation.check_out > start


def checks_out_in_period(reservation: Reservation, start: date, end: date) -> bool:
    return start <= reservation.check_out <= end


def belongs_to_property(reservation: Reservation, property_id: object) -> bool:
    target = coerce_property_id(property_id)
    return target is not None and coerce_property_id(reservation.property_id) == target


def filter_period_reservations(
    reservations: Iterable[Reservation],
    property_id: object,
    mode: str,
    start: date,
    end: date,
) -> list[Reservation]:
    """Select the reservations a statement period reports on.

    Args:
        reservations: Raw reservations (any property, any status)
        property_id: Property the statement is for (str or int)
        mode: "checkout" or "calendar"
        start: First day of the period
        end: Last day of the period (inclusive)

    Returns:
        list[Reservation]: Matching reservations sorted by check-in
    """
    date_match = overlaps_period if mode == CALENDAR else checks_out_in_period

    selected = [
        res
        for res in reservations
        if belongs_to_property(res, property_id)
        and is_allowed_status(res.status)
        and date_match(res, start, end)
    ]
    return sorted(selected, key=lambda res: (res.check_in, res.id))


@dataclass(frozen=True)
class Proration:
    """Share of a stay that falls inside a period."""

    factor: Decimal
    days_in_period: int
    total_days: int


def calculate_proration(reservation: Reservation, start: date, end: date) -> Proration:
    """Count the nights of a stay that fall inside ``[start, end]``.

    A night belongs to the day it starts on, so the period covers nights
    ``start`` through ``end`` and the stay covers ``check_in`` up to, but
    excluding, ``check_out``.
    """
    overlap_start = max(reservation.check_in, start)
    overlap_end = min(reservation.check_out, end + timedelta(days=1))

    days_in_period = max(0, (overlap_end - overlap_start).days)
    total_days = max(1, (reservation.check_out - reservation.check_in).days)

    return Proration(
        factor=Decimal(days_in_period) / Decimal(total_days),
        days_in_period=days_in_period,
        total_days=total_days,
    )


def _scale(amount: Decimal, proration: Proration) -> Decimal:
    # Multiply before dividing so whole-night shares stay exact
    return amount * proration.days_in_period / proration.total_days


def prorate_reservation(reservation: Reservation, start: date, end: date) -> Reservation:
    """Return a copy of a stay with revenue and tax scaled to the period.

    The guest-paid cleaning fee is charged once per stay and is not
    prorated.
    """
    if reservation.proration_factor is not None:
        return reservation

    proration = calculate_proration(reservation, start, end)
    return reservation.model_copy(
        update={
            "original_client_revenue": reservation.client_revenue,
            "original_client_tax_responsibility": reservation.client_tax_responsibility,
            "client_revenue": _scale(reservation.client_revenue, proration),
            "client_tax_responsibility": _scale(reservation.client_tax_responsibility, proration),
            "proration_factor": proration.factor,
            "proration_days": proration.days_in_period,
            "total_days": proration.total_days,
        }
    )
