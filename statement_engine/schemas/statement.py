"""Statement schemas."""

from datetime import date
from decimal import Decimal
from typing import Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

from statement_engine.schemas.reservation import Expense, Reservation

CalculationType = Literal["checkout", "calendar"]


class StatementPeriod(BaseModel):
    """Billing period of a statement (both ends inclusive)."""

    model_config = ConfigDict(frozen=True)

    start: date
    end: date
    calculation_type: CalculationType = "checkout"

    @model_validator(mode="after")
    def validate_bounds(self) -> "StatementPeriod":
        if self.end < self.start:
            raise ValueError("period end must not be before period start")
        return self


class ReservationLine(BaseModel):
    """Per-reservation payout row."""

    model_config = ConfigDict(frozen=True)

    reservation_id: str
    property_id: int
    source: str | None
    guest_name: str | None = None
    check_in: date
    check_out: date
    is_airbnb: bool
    is_cohost_airbnb: bool

    revenue: Decimal
    pm_fee_percentage: Decimal
    pm_fee: Decimal
    pm_fee_displayed: Decimal
    pm_fee_deducted: Decimal
    waiver_active: bool

    tax_responsibility: Decimal
    tax_added: Decimal

    guest_paid_cleaning_fee: Decimal
    cleaning_fee_actual: Decimal

    gross_payout: Decimal
    proration_note: str | None = None


class CleaningMismatchWarning(BaseModel):
    """Pass-through properties whose cleaning expense count differs from stays."""

    type: str = "cleaning_mismatch"
    message: str
    reservation_count: int
    cleaning_expense_count: int
    difference: int


class StatementTotals(BaseModel):
    """Totals reduced from the statement lines and period expenses."""

    model_config = ConfigDict(frozen=True)

    total_revenue: Decimal = Decimal("0")
    pm_commission: Decimal = Decimal("0")
    pm_commission_displayed: Decimal = Decimal("0")
    pm_commission_deducted: Decimal = Decimal("0")
    tax_added: Decimal = Decimal("0")
    cleaning_fee_actual: Decimal = Decimal("0")
    gross_payout: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    total_upsells: Decimal = Decimal("0")
    owner_payout: Decimal = Decimal("0")


class Statement(BaseModel):
    """Owner statement for one property or a combined group of properties.

    The reservation and expense snapshot is fixed at generation time;
    recomputation with newer settings yields a new ``Statement``.

    ``expenses`` is split into LL Cover, suppressed (cleaning costs under
    pass-through) and counted expenses. Only counted expenses enter the
    owner payout:

        owner_payout == sum(line.gross_payout) + sum(counted_expenses.amount)
    """

    id: UUID = Field(default_factory=uuid4)
    property_ids: list[int]
    period: StatementPeriod

    # Snapshot
    reservations: list[Reservation] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)

    # Partition of the expense snapshot (recomputed with settings)
    ll_cover_expenses: list[Expense] = Field(default_factory=list)
    suppressed_expenses: list[Expense] = Field(default_factory=list)
    counted_expenses: list[Expense] = Field(default_factory=list)

    # Computed
    lines: list[ReservationLine] = Field(default_factory=list)
    totals: StatementTotals = Field(default_factory=StatementTotals)

    # Advisory
    should_convert_to_calendar: bool = False
    calendar_conversion_notice: str = ""
    overlapping_reservation_count: int = 0
    cleaning_mismatch_warning: CleaningMismatchWarning | None = None

    status: str = "draft"

    @property
    def is_combined(self) -> bool:
        return len(self.property_ids) > 1

    @property
    def calculation_type(self) -> CalculationType:
        return self.period.calculation_type

    @property
    def total_revenue(self) -> Decimal:
        return self.totals.total_revenue

    @property
    def pm_commission_displayed(self) -> Decimal:
        return self.totals.pm_commission_displayed

    @property
    def pm_commission_deducted(self) -> Decimal:
        return self.totals.pm_commission_deducted

    @property
    def tax_added(self) -> Decimal:
        return self.totals.tax_added

    @property
    def cleaning_fee_actual(self) -> Decimal:
        return self.totals.cleaning_fee_actual

    @property
    def gross_payout(self) -> Decimal:
        return self.totals.gross_payout

    @property
    def owner_payout(self) -> Decimal:
        return self.totals.owner_payout


class GuardrailResult(BaseModel):
    """Outcome of the negative-balance check before an automated send."""

    can_send: bool
    reason: Literal["NEGATIVE_BALANCE", "POSITIVE_BALANCE"]
    message: str
    owner_payout: Decimal


class SendEligibility(BaseModel):
    """Every reason a statement email cannot go out (empty when it can)."""

    can_send: bool
    errors: list[str] = Field(default_factory=list)
