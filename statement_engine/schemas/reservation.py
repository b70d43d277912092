"""Reservation and expense schemas (read-only inputs to the engine)."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Reservation(BaseModel):
    """A recorded guest stay.

    Immutable once recorded. Calendar-mode statements work on prorated
    copies that carry the proration metadata and the original amounts.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    property_id: int
    source: str | None = None
    guest_name: str | None = None

    check_in: date
    check_out: date
    status: str = "confirmed"
    created_at: date | None = None

    # Finance
    client_revenue: Decimal = Decimal("0")
    client_tax_responsibility: Decimal = Decimal("0")
    cleaning_fee: Decimal | None = None

    # Proration (calendar mode only)
    proration_factor: Decimal | None = None
    proration_days: int | None = None
    total_days: int | None = None
    original_client_revenue: Decimal | None = None
    original_client_tax_responsibility: Decimal | None = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return str(v)

    @field_validator("client_revenue", "client_tax_responsibility", mode="before")
    @classmethod
    def default_missing_amount(cls, v):
        if v is None or v == "":
            return Decimal("0")
        return v

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        return (v or "").strip().lower()

    @property
    def proration_note(self) -> str | None:
        if self.proration_factor is None:
            return None
        return f"{self.proration_days}/{self.total_days} days in period"


class Expense(BaseModel):
    """A signed money movement attached to a property.

    Negative amounts are costs, positive amounts are credits or upsells.
    An expense without a property id applies to every property on the
    statement.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    property_id: int | None = None
    date: date
    amount: Decimal = Decimal("0")
    description: str = ""
    vendor: str = ""
    category: str = ""
    type: str = Field(default="")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return str(v)

    @field_validator("amount", mode="before")
    @classmethod
    def default_missing_amount(cls, v):
        if v is None or v == "":
            return Decimal("0")
        return v

    @field_validator("description", "vendor", "category", "type", mode="before")
    @classmethod
    def default_missing_text(cls, v):
        return v or ""
