"""Booking channel classification.

Airbnb bookings are treated differently for tax (Airbnb remits its own
collected tax) and for co-hosting (revenue bypasses the owner). Every
channel check in the engine goes through this module.
"""

from enum import Enum


class ChannelTag(str, Enum):
    """Closed set of channel classes the engine distinguishes."""

    AIRBNB = "Airbnb"
    OTHER = "Other"


def classify_source(source: object) -> ChannelTag:
    """Classify a booking channel string.

    Args:
        source: Channel string as delivered by the PMS (e.g. "airbnbOfficial")

    Returns:
        ChannelTag: AIRBNB when "airbnb" appears anywhere, case-insensitive
    """
    if not isinstance(source, str) or not source:
        return ChannelTag.OTHER
    if "airbnb" in source.lower():
        return ChannelTag.AIRBNB
    return ChannelTag.OTHER


def is_airbnb_source(source: object) -> bool:
    return classify_source(source) is ChannelTag.AIRBNB
