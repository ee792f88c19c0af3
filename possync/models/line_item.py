"""Line item columns shared by sale and return lines."""
from decimal import Decimal
from sqlalchemy import Column, String, Numeric, Boolean
import enum


class LineKind(enum.Enum):
    """
    Closed classification of a sold/returned line.

    The wire format only has type ('good' | 'service') and an isCustom flag;
    custom lines are typed 'service' so they never touch stock.
    """
    GOOD = "good"
    SERVICE = "service"
    CUSTOM = "custom"

    @classmethod
    def from_wire(cls, line_type, is_custom=False):
        if is_custom:
            return cls.CUSTOM
        if line_type == 'good':
            return cls.GOOD
        if line_type == 'service':
            return cls.SERVICE
        raise ValueError(f'Unknown line type: {line_type!r}')

    @property
    def wire_type(self):
        if self is LineKind.GOOD:
            return 'good'
        if self is LineKind.SERVICE or self is LineKind.CUSTOM:
            return 'service'
        raise ValueError(f'Unhandled line kind: {self!r}')


class LineItemMixin:
    """Denormalized snapshot of what was sold: name and prices survive product deletion."""

    __wire_aliases__ = {'line_id': 'id'}

    # variant id for goods, product id for services, generated id for custom lines
    line_id = Column(String, nullable=False, index=True)
    product_id = Column(String, nullable=False)
    store_id = Column(String, nullable=True)
    type = Column(String(10), nullable=False)
    is_custom = Column(Boolean, nullable=False, default=False)
    name = Column(String, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    quantity = Column(Numeric(12, 3), nullable=False)
    purchase_price = Column(Numeric(12, 2), nullable=True)
    image = Column(String, nullable=True)

    @property
    def kind(self) -> LineKind:
        return LineKind.from_wire(self.type, bool(self.is_custom))

    @property
    def line_total(self) -> Decimal:
        return (self.price or Decimal('0')) * (self.quantity or Decimal('0'))
