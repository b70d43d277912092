"""Cleaning fee pass-through.

Guests are charged a marked-up cleaning fee:

    guest_paid = CEILING((actual + markup) * (1 + pm%), increment)

When reconciling, the actual cleaning cost is reconstructed from the
guest-paid amount:

    actual = max(0, round(guest_paid / (1 + pm%) - markup, 2))

The forward formula rounds up to the next increment, so the reconstructed
value can be off by up to ``increment / (1 + pm%)``.
"""

from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal

from statement_engine.config import settings

CENT = Decimal("0.01")


def _pm_multiplier(pm_fee_percentage: Decimal) -> Decimal:
    return Decimal("1") + Decimal(pm_fee_percentage) / Decimal("100")


def forward_cleaning_fee(actual_fee: Decimal, pm_fee_percentage: Decimal) -> Decimal:
    """Guest-paid cleaning fee produced from the actual cleaning cost."""
    increment = settings.cleaning_fee_rounding_increment
    raw = (Decimal(actual_fee) + settings.cleaning_fee_markup) * _pm_multiplier(pm_fee_percentage)
    return (raw / increment).to_integral_value(rounding=ROUND_CEILING) * increment


def reverse_cleaning_fee(
    guest_paid: Decimal | None,
    pm_fee_percentage: Decimal,
    cleaning_fee_pass_through: bool = True,
) -> Decimal:
    """Reconstruct the actual cleaning cost from the guest-paid fee.

    Args:
        guest_paid: Cleaning fee paid by the guest
        pm_fee_percentage: PM fee percentage of the property
        cleaning_fee_pass_through: Property passes cleaning through

    Returns:
        Decimal: Actual cleaning cost, 0 when pass-through is off or nothing was paid
    """
    if not cleaning_fee_pass_through or guest_paid is None or guest_paid <= 0:
        return Decimal("0")

    actual = Decimal(guest_paid) / _pm_multiplier(pm_fee_percentage) - settings.cleaning_fee_markup
    return max(Decimal("0"), actual.quantize(CENT, rounding=ROUND_HALF_UP))


def max_reversal_error(pm_fee_percentage: Decimal) -> Decimal:
    """Largest gap between the true and the reconstructed cleaning cost."""
    return settings.cleaning_fee_rounding_increment / _pm_multiplier(pm_fee_percentage)
