"""Purchase model."""
from sqlalchemy import Column, String, Numeric, DateTime
from sqlalchemy.orm import relationship
from possync.database import Base
from possync.models.wire import WireMixin


class Purchase(WireMixin, Base):
    """
    Supplier purchase.

    Mutable: amount_paid and remaining_amount move as the supplier debt is paid.
    """

    __tablename__ = 'purchases'
    __wire_table__ = 'purchases'

    id = Column(String, primary_key=True)
    store_id = Column(String, nullable=False, index=True)
    supplier_id = Column(String, nullable=True, index=True)
    date = Column(DateTime(timezone=True), nullable=True)
    total_amount = Column(Numeric(14, 2), nullable=False, default=0)
    amount_paid = Column(Numeric(14, 2), nullable=False, default=0)
    remaining_amount = Column(Numeric(14, 2), nullable=False, default=0)
    payment_method = Column(String, nullable=False, default='cash')
    reference = Column(String, nullable=True)

    # Relationships
    items = relationship(
        'PurchaseItem', back_populates='purchase', cascade='all, delete-orphan',
        order_by='PurchaseItem.position', lazy='selectin'
    )

    @classmethod
    def from_dict(cls, data: dict, **extra):
        from possync.models.purchase_item import PurchaseItem
        purchase = super().from_dict(data, **extra)
        purchase.items = [
            PurchaseItem.from_dict(item, purchase_id=purchase.id, position=position)
            for position, item in enumerate(data.get('items') or [])
        ]
        return purchase

    def to_dict(self, exclude_none: bool = False) -> dict:
        rv = super().to_dict(exclude_none=exclude_none)
        rv['items'] = [item.to_dict(exclude_none=exclude_none) for item in self.items]
        return rv

    def __repr__(self):
        return f"<Purchase(id={self.id}, total_amount={self.total_amount}, remaining_amount={self.remaining_amount})>"
