"""Application configuration via pydantic-settings."""

from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Property defaults (used when a property has no stored settings)
    default_pm_fee_percentage: Decimal = Decimal("15")

    # Cleaning fee pass-through (guestPaid = CEILING((actual + markup) * (1 + pm%), increment))
    cleaning_fee_markup: Decimal = Decimal("50")
    cleaning_fee_rounding_increment: Decimal = Decimal("5")

    # Reservation lifecycle statuses that count toward a statement
    allowed_reservation_statuses: List[str] = ["confirmed", "modified", "new", "accepted"]

    # Email (SMTP) - transport lives outside the engine, only presence is checked
    smtp_host: Optional[str] = None
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = Field(default=None)

    @computed_field
    @property
    def smtp_configured(self) -> bool:
        """Whether enough SMTP settings are present to send statements."""
        return bool(self.smtp_host and self.smtp_user and self.smtp_password)

    # Bulk generation
    bulk_max_concurrency: int = 8


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
