"""Sale model."""
from decimal import Decimal
from sqlalchemy import Column, String, Numeric, DateTime
from sqlalchemy.orm import relationship
from possync.database import Base
from possync.models.wire import WireMixin


class Sale(WireMixin, Base):
    """
    Confirmed sale. Immutable once created.

    A sale with a zero total and a negative remaining_amount is a debt
    payment record: it carries the amount a customer paid off. Such records
    usually have no items; older ones carry a single custom line.
    """

    __tablename__ = 'sales'
    __wire_table__ = 'sales'

    id = Column(String, primary_key=True)
    store_id = Column(String, nullable=False, index=True)
    user_id = Column(String, nullable=True)
    customer_id = Column(String, nullable=True, index=True)
    date = Column(DateTime(timezone=True), nullable=True)
    total = Column(Numeric(12, 2), nullable=False, default=0)
    discount = Column(Numeric(12, 2), nullable=True)
    down_payment = Column(Numeric(12, 2), nullable=False, default=0)
    remaining_amount = Column(Numeric(12, 2), nullable=False, default=0)
    profit = Column(Numeric(12, 2), nullable=False, default=0)

    # Relationships
    items = relationship(
        'SaleItem', back_populates='sale', cascade='all, delete-orphan',
        order_by='SaleItem.position', lazy='selectin'
    )

    @property
    def is_debt_payment(self):
        return (self.total or Decimal('0')) == 0 and (self.remaining_amount or Decimal('0')) < 0

    @classmethod
    def from_dict(cls, data: dict, **extra):
        from possync.models.sale_item import SaleItem
        sale = super().from_dict(data, **extra)
        sale.items = [
            SaleItem.from_dict(item, sale_id=sale.id, position=position)
            for position, item in enumerate(data.get('items') or [])
        ]
        return sale

    def to_dict(self, exclude_none: bool = False) -> dict:
        rv = super().to_dict(exclude_none=exclude_none)
        rv['items'] = [item.to_dict(exclude_none=exclude_none) for item in self.items]
        return rv

    def __repr__(self):
        return f"<Sale(id={self.id}, total={self.total}, remaining_amount={self.remaining_amount})>"
