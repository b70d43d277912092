"""Owner payout calculation.

CRITICAL BUSINESS LOGIC:
- ``calculate_reservation_payout`` is the only place a reservation's payout
  is computed; statement totals are a reduction over its lines, so row and
  total views cannot drift apart
- Settings are always looked up for the reservation's own property, never
  taken from the statement, so combined statements do not leak one
  property's flags into another
- Co-hosted Airbnb stays pay the owner nothing (Airbnb pays them
  directly); the line is the negative PM fee
- Otherwise: revenue - deducted PM fee + attributed tax - actual cleaning cost
"""

from collections.abc import Iterable, Sequence
from decimal import Decimal

from statement_engine.domain.cleaning_fee import reverse_cleaning_fee
from statement_engine.domain.commission import (
    calculate_commission,
    get_effective_pm_fee,
    is_waiver_active,
)
from statement_engine.domain.period_filter import CALENDAR, prorate_reservation
from statement_engine.domain.source import is_airbnb_source
from statement_engine.domain.tax import calculate_tax_to_add
from statement_engine.schemas.property_settings import PropertySettings
from statement_engine.schemas.reservation import Reservation
from statement_engine.schemas.statement import ReservationLine, StatementPeriod, StatementTotals
from statement_engine.services.expense_service import ExpenseSummary
from statement_engine.services.settings_service import PropertySettingsMap

ZERO = Decimal("0")


class PayoutService:
    """Per-reservation payouts and their reduction into statement totals."""

    def calculate_reservation_payout(
        self,
        reservation: Reservation,
        settings: PropertySettings,
        period: StatementPeriod,
    ) -> ReservationLine:
        """Calculate the payout line of one reservation.

        Args:
            reservation: Reservation (already prorated in calendar mode)
            settings: Settings of the reservation's own property
            period: Statement period

        Returns:
            ReservationLine: Commission, tax, cleaning and payout figures
        """
        is_airbnb = is_airbnb_source(reservation.source)
        is_cohost_airbnb = is_airbnb and settings.is_cohost_on_airbnb

        revenue = reservation.client_revenue
        pm_fee_percentage = get_effective_pm_fee(settings, reservation.created_at)
        waiver_active = is_waiver_active(settings, period.end)
        commission = calculate_commission(revenue, pm_fee_percentage, is_cohost_airbnb, waiver_active)

        tax_added = calculate_tax_to_add(
            reservation.client_tax_responsibility,
            is_airbnb,
            settings.airbnb_pass_through_tax,
            settings.disregard_tax,
        )

        # Calendar mode charges cleaning once, in the period the guest checks out
        guest_paid_cleaning = reservation.cleaning_fee or ZERO
        cleaning_fee_actual = ZERO
        if period.calculation_type != CALENDAR or reservation.check_out <= period.end:
            cleaning_fee_actual = reverse_cleaning_fee(
                guest_paid_cleaning, pm_fee_percentage, settings.cleaning_fee_pass_through
            )

        if is_cohost_airbnb:
            cohost_fee = ZERO if waiver_active else commission.pm_fee
            gross_payout = -cohost_fee - cleaning_fee_actual
        else:
            gross_payout = revenue - commission.pm_fee_deducted + tax_added - cleaning_fee_actual

        return ReservationLine(
            reservation_id=reservation.id,
            property_id=reservation.property_id,
            source=reservation.source,
            guest_name=reservation.guest_name,
            check_in=reservation.check_in,
            check_out=reservation.check_out,
            is_airbnb=is_airbnb,
            is_cohost_airbnb=is_cohost_airbnb,
            revenue=revenue,
            pm_fee_percentage=pm_fee_percentage,
            pm_fee=commission.pm_fee,
            pm_fee_displayed=commission.pm_fee_displayed,
            pm_fee_deducted=commission.pm_fee_deducted,
            waiver_active=waiver_active,
            tax_responsibility=reservation.client_tax_responsibility,
            tax_added=tax_added,
            guest_paid_cleaning_fee=guest_paid_cleaning,
            cleaning_fee_actual=cleaning_fee_actual,
            gross_payout=gross_payout,
            proration_note=reservation.proration_note,
        )

    def calculate_lines(
        self,
        reservations: Iterable[Reservation],
        settings_map: PropertySettingsMap,
        period: StatementPeriod,
    ) -> list[ReservationLine]:
        """Payout lines for a statement, prorating stays in calendar mode."""
        lines = []
        for reservation in reservations:
            if period.calculation_type == CALENDAR:
                reservation = prorate_reservation(reservation, period.start, period.end)
            settings = settings_map.for_property(reservation.property_id)
            lines.append(self.calculate_reservation_payout(reservation, settings, period))
        return lines

    def aggregate_totals(
        self,
        lines: Sequence[ReservationLine],
        expense_summary: ExpenseSummary,
    ) -> StatementTotals:
        """Reduce payout lines and counted expenses into statement totals.

        Co-hosted Airbnb revenue is paid to the owner by Airbnb and is left
        out of total revenue.
        """
        total_revenue = ZERO
        pm_commission = ZERO
        pm_commission_displayed = ZERO
        pm_commission_deducted = ZERO
        tax_added = ZERO
        cleaning_fee_actual = ZERO
        gross_payout = ZERO

        for line in lines:
            if not line.is_cohost_airbnb:
                total_revenue += line.revenue
            pm_commission += line.pm_fee
            pm_commission_displayed += line.pm_fee_displayed
            pm_commission_deducted += line.pm_fee_deducted
            tax_added += line.tax_added
            cleaning_fee_actual += line.cleaning_fee_actual
            gross_payout += line.gross_payout

        return StatementTotals(
            total_revenue=total_revenue,
            pm_commission=pm_commission,
            pm_commission_displayed=pm_commission_displayed,
            pm_commission_deducted=pm_commission_deducted,
            tax_added=tax_added,
            cleaning_fee_actual=cleaning_fee_actual,
            gross_payout=gross_payout,
            total_expenses=expense_summary.total_expenses,
            total_upsells=expense_summary.total_upsells,
            owner_payout=gross_payout + expense_summary.net_amount,
        )


payout_service = PayoutService()
