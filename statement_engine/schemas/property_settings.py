"""Per-property financial settings schema."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from statement_engine.config import settings as app_settings


class PropertySettings(BaseModel):
    """Financial settings of a single property.

    Storage layers that persist booleans as 0/1 (or leave them NULL) are
    canonicalised here, so the rest of the engine only ever sees real
    ``bool`` values.
    """

    model_config = ConfigDict(frozen=True)

    pm_fee_percentage: Decimal = Field(default_factory=lambda: app_settings.default_pm_fee_percentage, ge=0)
    disregard_tax: bool = False
    airbnb_pass_through_tax: bool = False
    is_cohost_on_airbnb: bool = False
    cleaning_fee_pass_through: bool = False

    # Commission waiver (no end date = indefinite while enabled)
    waive_commission: bool = False
    waive_commission_until: date | None = None

    # Scheduled PM fee change, keyed on reservation creation date
    new_pm_fee_enabled: bool = False
    new_pm_fee_percentage: Decimal | None = Field(default=None, ge=0)
    new_pm_fee_start_date: date | None = None

    @field_validator(
        "disregard_tax",
        "airbnb_pass_through_tax",
        "is_cohost_on_airbnb",
        "cleaning_fee_pass_through",
        "waive_commission",
        "new_pm_fee_enabled",
        mode="before",
    )
    @classmethod
    def canonicalize_flag(cls, v):
        if v is None or v == "":
            return False
        return v

    @field_validator("pm_fee_percentage", mode="before")
    @classmethod
    def default_pm_fee(cls, v):
        if v is None or v == "":
            return app_settings.default_pm_fee_percentage
        return v

    @field_validator("waive_commission_until", "new_pm_fee_start_date", "new_pm_fee_percentage", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if v == "":
            return None
        return v


def default_property_settings() -> PropertySettings:
    """Settings applied when a property has none (or invalid ones) stored."""
    return PropertySettings()
