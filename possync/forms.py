"""
Input records for catalog and stock operations.

These are the values the UI collects; they are validated by the services
before anything is sent to the remote store.
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional

from possync.exceptions import ValidationError
from possync.models import ProductType
from possync.models.wire import to_decimal

_REQUIRED = object()


def parse_amount(value, label: str, default=_REQUIRED) -> Optional[Decimal]:
    """
    Parse a number typed by the user.

    Args:
        value: str, int, float or Decimal as collected by the UI
        label: Field name used in the error message
        default: Returned for an empty value; without it the value is required

    Raises:
        ValidationError: Empty required value, or anything that is not a
            finite number (text, NaN, infinity)
    """
    if value is None or value == '':
        if default is _REQUIRED:
            raise ValidationError(f'{label} is required')
        return default

    try:
        amount = to_decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f'{label} must be a number')
    if not amount.is_finite():
        raise ValidationError(f'{label} must be a number')
    return amount


@dataclass
class VariantForm:
    """A variant row of the product form. id is None for a new variant."""
    name: str
    price: Decimal = Decimal('0')
    purchase_price: Decimal = Decimal('0')
    price_semi_wholesale: Optional[Decimal] = None
    price_wholesale: Optional[Decimal] = None
    barcode: Optional[str] = None
    low_stock_threshold: Optional[Decimal] = None
    image: str = ''
    # Requested on-hand quantity; more than the derived stock creates a batch
    stock_quantity: Decimal = Decimal('0')
    id: Optional[str] = None


@dataclass
class ProductForm:
    """Product fields. id is None when creating."""
    name: str
    type: ProductType = ProductType.GOOD
    category_id: Optional[str] = None
    supplier_id: Optional[str] = None
    image: str = ''
    price: Optional[Decimal] = None
    price_semi_wholesale: Optional[Decimal] = None
    price_wholesale: Optional[Decimal] = None
    id: Optional[str] = None

    def __post_init__(self):
        self.type = ProductType(self.type)


@dataclass
class StockIntake:
    """Quick restock of a single variant."""
    variant_id: str
    quantity: Decimal
    purchase_price: Decimal
    selling_price: Decimal
    supplier_id: Optional[str] = None


@dataclass
class PurchaseLineForm:
    """One line of a supplier purchase."""
    variant_id: str
    quantity: Decimal
    purchase_price: Decimal
