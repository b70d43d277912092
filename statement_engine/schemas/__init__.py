"""Pydantic schemas for engine inputs and outputs."""

from statement_engine.schemas.property_settings import PropertySettings, default_property_settings
from statement_engine.schemas.reservation import Expense, Reservation
from statement_engine.schemas.statement import (
    CleaningMismatchWarning,
    GuardrailResult,
    ReservationLine,
    SendEligibility,
    Statement,
    StatementPeriod,
    StatementTotals,
)

__all__ = [
    # Inputs
    "Reservation",
    "Expense",
    "PropertySettings",
    "default_property_settings",
    "StatementPeriod",
    # Statement
    "Statement",
    "StatementTotals",
    "ReservationLine",
    "CleaningMismatchWarning",
    # Sending
    "GuardrailResult",
    "SendEligibility",
]
