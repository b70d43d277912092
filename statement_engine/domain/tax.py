"""Tax attribution.

Priority, highest first:
1. disregard_tax: the company remits tax for the owner, never add it
2. non-Airbnb channels: tax is added (these channels do not remit it)
3. Airbnb: added only with airbnb_pass_through_tax (jurisdictions where
   Airbnb does not remit collected tax)
"""

from decimal import Decimal


def should_add_tax(is_airbnb: bool, airbnb_pass_through_tax: bool, disregard_tax: bool) -> bool:
    return not disregard_tax and (not is_airbnb or bool(airbnb_pass_through_tax))


def calculate_tax_to_add(
    tax_amount: Decimal | None,
    is_airbnb: bool,
    airbnb_pass_through_tax: bool,
    disregard_tax: bool,
) -> Decimal:
    """Tax responsibility credited to the owner for one reservation."""
    if not should_add_tax(is_airbnb, airbnb_pass_through_tax, disregard_tax):
        return Decimal("0")
    return tax_amount or Decimal("0")
