"""Price tier resolution for products, variants and cart lines."""
from decimal import Decimal
import enum


class PriceTier(str, enum.Enum):
    """Selling price tier chosen per transaction."""
    UNIT = 'unit'
    SEMI_WHOLESALE = 'semiWholesale'
    WHOLESALE = 'wholesale'


def _positive(value):
    return value is not None and value > 0


def price_for(item, tier: PriceTier) -> Decimal:
    """
    Resolve the selling price of a variant or service for a tier.

    Rules, in order:
    1. wholesale and a positive price_wholesale -> price_wholesale
    2. semiWholesale and a positive price_semi_wholesale -> price_semi_wholesale
    3. price (0 when missing)

    A tier without its own positive price falls back to the unit price, never
    to the other tier.
    """
    tier = PriceTier(tier)
    wholesale = getattr(item, 'price_wholesale', None)
    semi_wholesale = getattr(item, 'price_semi_wholesale', None)

    if tier is PriceTier.WHOLESALE and _positive(wholesale):
        return Decimal(wholesale)
    if tier is PriceTier.SEMI_WHOLESALE and _positive(semi_wholesale):
        return Decimal(semi_wholesale)
    price = getattr(item, 'price', None)
    return Decimal(price) if price is not None else Decimal('0')
