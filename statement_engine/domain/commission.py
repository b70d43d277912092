"""PM commission calculation.

CRITICAL BUSINESS LOGIC:
- The PM fee is revenue * pm% and is always shown on the statement line
- Co-hosted Airbnb stays never have the fee deducted from revenue (the
  owner is charged the fee as a negative line instead)
- An active commission waiver keeps the fee visible but deducts nothing
  ("ghost fee")
- Co-host and waiver together still deduct zero, never less
"""

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from statement_engine.schemas.property_settings import PropertySettings

CENT = Decimal("0.01")


def round_currency(amount: Decimal) -> Decimal:
    """Round to cents, half away from zero."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class CommissionBreakdown:
    """PM fee for one reservation.

    ``pm_fee`` is exact and feeds payouts, ``pm_fee_displayed`` is the
    cent-rounded figure printed on the statement line.
    """

    pm_fee: Decimal
    pm_fee_displayed: Decimal
    pm_fee_deducted: Decimal


def calculate_pm_fee(revenue: Decimal, pm_fee_percentage: Decimal) -> Decimal:
    return revenue * (pm_fee_percentage / Decimal("100"))


def get_effective_pm_fee(settings: PropertySettings, reservation_created_at: date | None) -> Decimal:
    """PM fee percentage that applies to a reservation.

    A scheduled fee change applies to reservations created on or after its
    start date. Reservations with an unknown creation date keep the base fee.

    Args:
        settings: Owning property's settings
        reservation_created_at: Date the reservation was booked

    Returns:
        Decimal: Fee percentage (e.g. 15 for 15%)
    """
    base_fee = settings.pm_fee_percentage
    if (
        not settings.new_pm_fee_enabled
        or settings.new_pm_fee_start_date is None
        or settings.new_pm_fee_percentage is None
    ):
        return base_fee
    if reservation_created_at is None:
        return base_fee
    if reservation_created_at >= settings.new_pm_fee_start_date:
        return settings.new_pm_fee_percentage
    return base_fee


def is_waiver_active(settings: PropertySettings, statement_end_date: date) -> bool:
    """Whether the commission waiver covers a statement.

    The waiver's end date counts through the end of that day, so a
    statement ending on ``waive_commission_until`` is still waived.
    """
    if not settings.waive_commission:
        return False
    if settings.waive_commission_until is None:
        return True
    return statement_end_date <= settings.waive_commission_until


def calculate_commission(
    revenue: Decimal,
    pm_fee_percentage: Decimal,
    is_cohost_airbnb: bool,
    waiver_active: bool,
) -> CommissionBreakdown:
    """Calculate the displayed and deducted PM fee.

    Args:
        revenue: Client revenue of the reservation
        pm_fee_percentage: Effective fee percentage
        is_cohost_airbnb: Airbnb stay on a co-hosted property
        waiver_active: Commission waiver covers the statement

    Returns:
        CommissionBreakdown: Exact, displayed and deducted fee
    """
    pm_fee = calculate_pm_fee(revenue, pm_fee_percentage)
    deducted = Decimal("0") if (is_cohost_airbnb or waiver_active) else pm_fee
    return CommissionBreakdown(
        pm_fee=pm_fee,
        pm_fee_displayed=round_currency(pm_fee),
        pm_fee_deducted=deducted,
    )
