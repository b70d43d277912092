"""Custom validation utilities."""

import re
from decimal import Decimal, InvalidOperation

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def validate_email_address(email: str | None) -> bool:
    """Validate an email address against a plain local@domain.tld shape.

    Args:
        email: Email address to validate

    Returns:
        bool: True if the address has a local part, a domain and a TLD
    """
    if not email or not isinstance(email, str):
        return False
    return EMAIL_PATTERN.match(email) is not None


def coerce_property_id(value: object) -> int | None:
    """Coerce a property id delivered as str/int/float to an int.

    Args:
        value: Raw property id

    Returns:
        int | None: Numeric id, or None when the value is not numeric
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        pass
    try:
        return int(Decimal(str(value).strip()))
    except (InvalidOperation, ValueError, OverflowError):
        return None


def parse_amount(value: object) -> Decimal:
    """Parse a money amount, treating anything non-numeric as zero.

    Args:
        value: Amount as Decimal, int, float or string

    Returns:
        Decimal: Parsed amount (0 when missing or unparseable)
    """
    if value is None or isinstance(value, bool):
        return Decimal("0")
    if isinstance(value, Decimal):
        return value if value.is_finite() else Decimal("0")
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal("0")
    return parsed if parsed.is_finite() else Decimal("0")
