"""Cart Service - in-memory cart for the sale and return screens."""
import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Dict, List, Optional

from possync.exceptions import InsufficientStockError, NotFoundError, ValidationError
from possync.models import LineKind
from possync.forms import parse_amount
from possync.models.wire import to_wire
from possync.services.pricing import PriceTier, price_for

logger = logging.getLogger(__name__)

MIN_QUANTITY = Decimal('0.5')


@dataclass
class CartItem:
    """
    Transient cart line.

    id is the variant id for goods, the product id for services and a
    generated uuid for custom lines.
    """
    id: str
    product_id: str
    store_id: Optional[str]
    kind: LineKind
    name: str
    price: Decimal
    quantity: Decimal = Decimal('1')
    purchase_price: Optional[Decimal] = None
    # Derived stock at the time the line was added (goods only)
    stock: Optional[Decimal] = None
    image: str = ''

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    def to_line(self) -> dict:
        """Wire shape shared by sale and return items."""
        return {
            'id': self.id,
            'productId': self.product_id,
            'storeId': self.store_id,
            'type': self.kind.wire_type,
            'isCustom': self.kind is LineKind.CUSTOM,
            'name': self.name,
            'price': to_wire(self.price),
            'quantity': to_wire(self.quantity),
            'purchasePrice': to_wire(self.purchase_price),
            'image': self.image or '',
        }


def variant_line_name(product, variant) -> str:
    if product is None:
        return variant.name
    if not variant.name:
        return product.name
    return f"{product.name} - {variant.name}"


class CartAggregate:
    """
    Ordered cart keyed by line id.

    In return mode stock caps are lifted: items are coming back, not going out.
    """

    def __init__(self, price_tier: PriceTier = PriceTier.UNIT):
        self._items: Dict[str, CartItem] = {}
        self.price_tier = PriceTier(price_tier)
        self.return_mode = False

    @property
    def items(self) -> List[CartItem]:
        return list(self._items.values())

    @property
    def is_empty(self) -> bool:
        return not self._items

    @property
    def subtotal(self) -> Decimal:
        return sum((item.line_total for item in self._items.values()), Decimal('0'))

    def __len__(self):
        return len(self._items)

    def __contains__(self, line_id):
        return line_id in self._items

    def get(self, line_id: str) -> Optional[CartItem]:
        return self._items.get(line_id)

    def _get_or_404(self, line_id: str) -> CartItem:
        item = self._items.get(line_id)
        if item is None:
            raise NotFoundError(f'Line {line_id} is not in the cart')
        return item

    # =====================================================
    # ADDING LINES
    # =====================================================

    def add_variant(self, variant, product, stock: Decimal) -> CartItem:
        """
        Add one unit of a variant, or increment its line.

        Raises:
            InsufficientStockError: In sale mode when the variant is out of stock
                or the increment would exceed the derived stock
        """
        name = variant_line_name(product, variant)
        existing = self._items.get(variant.id)

        if not self.return_mode:
            if stock <= 0:
                raise InsufficientStockError(name, Decimal('1'), stock)
            if existing is not None and existing.quantity + 1 > stock:
                raise InsufficientStockError(name, existing.quantity + 1, stock)

        if existing is not None:
            existing.quantity += 1
            existing.stock = stock
            return existing

        item = CartItem(
            id=variant.id,
            product_id=variant.product_id,
            store_id=variant.store_id,
            kind=LineKind.GOOD,
            name=name,
            price=price_for(variant, self.price_tier),
            purchase_price=variant.purchase_price,
            stock=stock,
            image=variant.image or (product.image if product is not None else '') or '',
        )
        self._items[item.id] = item
        logger.debug(f"[CART] Added {item.name} at {item.price}")
        return item

    def add_service(self, product) -> CartItem:
        if not product.is_service:
            raise ValidationError(f'{product.name} is not a service')

        existing = self._items.get(product.id)
        if existing is not None:
            existing.quantity += 1
            return existing

        item = CartItem(
            id=product.id,
            product_id=product.id,
            store_id=product.store_id,
            kind=LineKind.SERVICE,
            name=product.name,
            price=price_for(product, self.price_tier),
            image=product.image or '',
        )
        self._items[item.id] = item
        return item

    def add_custom_item(self, name: str, price, quantity=Decimal('1'), store_id: Optional[str] = None) -> CartItem:
        """Free-form line (no product behind it). Never moves stock."""
        name = (name or '').strip()
        if not name:
            raise ValidationError('Custom item name is required')

        line_id = str(uuid.uuid4())
        item = CartItem(
            id=line_id,
            product_id=line_id,
            store_id=store_id,
            kind=LineKind.CUSTOM,
            name=name,
            price=max(parse_amount(price, 'Price', default=Decimal('0')), Decimal('0')),
            quantity=max(parse_amount(quantity, 'Quantity', default=MIN_QUANTITY), MIN_QUANTITY),
        )
        self._items[item.id] = item
        return item

    # =====================================================
    # EDITING LINES
    # =====================================================

    def update_quantity(self, line_id: str, quantity) -> CartItem:
        """Set a line quantity. Floor 0.5; goods are capped at their stock snapshot in sale mode."""
        item = self._get_or_404(line_id)
        quantity = max(parse_amount(quantity, 'Quantity', default=MIN_QUANTITY), MIN_QUANTITY)

        if item.kind is LineKind.GOOD and not self.return_mode and item.stock is not None:
            quantity = min(quantity, item.stock)

        item.quantity = quantity
        return item

    def update_price(self, line_id: str, price) -> CartItem:
        item = self._get_or_404(line_id)
        item.price = max(parse_amount(price, 'Price', default=Decimal('0')), Decimal('0'))
        return item

    def remove(self, line_id: str) -> None:
        self._items.pop(line_id, None)

    def clear(self) -> None:
        self._items.clear()

    def set_price_tier(self, tier: PriceTier, get_variant: Callable, get_product: Callable) -> None:
        """
        Switch the price tier and re-price every line from its source.

        Goods are re-priced from their variant and services from their
        product. Custom lines and quantities are left as they are.
        """
        self.price_tier = PriceTier(tier)

        for item in self._items.values():
            if item.kind is LineKind.GOOD:
                source = get_variant(item.id)
            elif item.kind is LineKind.SERVICE:
                source = get_product(item.product_id)
            elif item.kind is LineKind.CUSTOM:
                continue
            else:
                raise ValueError(f'Unhandled line kind: {item.kind!r}')

            if source is not None:
                item.price = price_for(source, self.price_tier)

        logger.debug(f"[CART] Price tier set to {self.price_tier.value}")

    def set_return_mode(self, enabled: bool) -> None:
        """Switching between sale and return mode empties the cart."""
        enabled = bool(enabled)
        if enabled != self.return_mode:
            self.clear()
        self.return_mode = enabled
