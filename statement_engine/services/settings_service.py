"""Property settings loading and resolution.

Settings flow through two stages:
1. ``load_property_settings`` canonicalises whatever the storage layer
   returns (dicts with 0/1 flags, NULLs, camelCase keys) into
   ``PropertySettings``; invalid records fall back to defaults.
2. ``resolve_effective_settings`` builds the per-property map used for any
   (re)computation of a statement. Current settings always win; a
   statement never carries its own settings snapshot.
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from statement_engine.schemas.property_settings import PropertySettings, default_property_settings
from statement_engine.schemas.statement import Statement
from statement_engine.utils.validators import coerce_property_id

logger = logging.getLogger(__name__)

# Listing records from the PMS/database use camelCase keys
_CAMEL_CASE_KEYS = {
    "pmFeePercentage": "pm_fee_percentage",
    "disregardTax": "disregard_tax",
    "airbnbPassThroughTax": "airbnb_pass_through_tax",
    "isCohostOnAirbnb": "is_cohost_on_airbnb",
    "cleaningFeePassThrough": "cleaning_fee_pass_through",
    "waiveCommission": "waive_commission",
    "waiveCommissionUntil": "waive_commission_until",
    "newPmFeeEnabled": "new_pm_fee_enabled",
    "newPmFeePercentage": "new_pm_fee_percentage",
    "newPmFeeStartDate": "new_pm_fee_start_date",
}


def load_property_settings(raw: PropertySettings | Mapping[str, Any] | None) -> PropertySettings:
    """Canonicalise a stored settings record.

    Args:
        raw: ``PropertySettings``, a mapping in snake_case or camelCase, or None

    Returns:
        PropertySettings: Parsed settings, defaults when missing or invalid
    """
    if isinstance(raw, PropertySettings):
        return raw
    if not raw:
        return default_property_settings()
    if not isinstance(raw, Mapping):
        logger.warning(f"Ignoring property settings of type {type(raw).__name__}, using defaults")
        return default_property_settings()

    data = {_CAMEL_CASE_KEYS.get(key, key): value for key, value in raw.items()}
    fields = {key: value for key, value in data.items() if key in PropertySettings.model_fields}

    try:
        return PropertySettings.model_validate(fields)
    except PydanticValidationError as e:
        logger.warning(f"Invalid property settings, using defaults: {e.error_count()} error(s)")
        return default_property_settings()


class PropertySettingsMap(Mapping[int, PropertySettings]):
    """Read-only property id → settings map with an explicit default.

    Lookups coerce ids numerically, so "100001" and 100001 hit the same
    entry. Unknown ids return the default instead of raising.
    """

    def __init__(
        self,
        entries: Mapping[Any, PropertySettings | Mapping[str, Any] | None] | None = None,
        default: PropertySettings | None = None,
    ) -> None:
        parsed: dict[int, PropertySettings] = {}
        for key, value in (entries or {}).items():
            property_id = coerce_property_id(key)
            if property_id is None:
                logger.warning(f"Skipping settings for non-numeric property id {key!r}")
                continue
            parsed[property_id] = load_property_settings(value)
        self._entries = MappingProxyType(parsed)
        self.default = default or default_property_settings()

    def __getitem__(self, property_id: object) -> PropertySettings:
        key = coerce_property_id(property_id)
        if key is None or key not in self._entries:
            raise KeyError(property_id)
        return self._entries[key]

    def __iter__(self) -> Iterator[int]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def for_property(self, property_id: object) -> PropertySettings:
        """Settings of a property, falling back to the map's default."""
        key = coerce_property_id(property_id)
        if key is not None and key in self._entries:
            return self._entries[key]
        logger.info(f"No settings for property {property_id!r}, using defaults")
        return self.default

    @classmethod
    def single(cls, property_id: object, settings: PropertySettings | Mapping[str, Any] | None) -> "PropertySettingsMap":
        return cls({property_id: settings})


def build_settings_map(
    property_ids: Iterable[object],
    settings: PropertySettings | Mapping[Any, Any] | None,
) -> PropertySettingsMap:
    """Normalise the settings argument of a generation request.

    A single ``PropertySettings`` (or a flat settings record) applies to
    every listed property; a mapping keyed by property id is used as is.
    """
    ids = list(property_ids)
    if settings is None or isinstance(settings, PropertySettings):
        return PropertySettingsMap({pid: settings for pid in ids})
    if isinstance(settings, PropertySettingsMap):
        return settings
    if isinstance(settings, Mapping) and _looks_like_settings_record(settings):
        return PropertySettingsMap({pid: settings for pid in ids})
    return PropertySettingsMap(settings)


def _looks_like_settings_record(data: Mapping[Any, Any]) -> bool:
    known = set(PropertySettings.model_fields) | set(_CAMEL_CASE_KEYS)
    return any(isinstance(key, str) and key in known for key in data)


def resolve_effective_settings(
    statement: Statement,
    current_property_settings: Mapping[Any, Any] | PropertySettingsMap,
) -> PropertySettingsMap:
    """Settings used to recompute a stored statement.

    Args:
        statement: Stored statement (only its property ids are used)
        current_property_settings: Today's settings keyed by property id

    Returns:
        PropertySettingsMap: Current settings for each statement property,
            defaults for properties without stored settings
    """
    current = build_settings_map(statement.property_ids, current_property_settings)
    return PropertySettingsMap({pid: current.for_property(pid) for pid in statement.property_ids})
