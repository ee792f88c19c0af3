"""Purchase Item model."""
from sqlalchemy import Column, String, Integer, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from possync.database import Base
from possync.models.wire import WireMixin


class PurchaseItem(WireMixin, Base):
    """Purchase line (embedded in the purchase record on the wire)."""

    __tablename__ = 'purchase_items'
    __wire_exclude__ = ('purchase_id', 'position')

    purchase_id = Column(String, ForeignKey('purchases.id', ondelete='CASCADE'), primary_key=True)
    position = Column(Integer, primary_key=True)
    variant_id = Column(String, nullable=False)
    product_id = Column(String, nullable=False)
    product_name = Column(String, nullable=False, default='')
    variant_name = Column(String, nullable=False, default='')
    quantity = Column(Numeric(12, 3), nullable=False)
    purchase_price = Column(Numeric(12, 2), nullable=False)

    # Relationships
    purchase = relationship('Purchase', back_populates='items')

    def __repr__(self):
        return f"<PurchaseItem(purchase_id={self.purchase_id}, variant_id={self.variant_id}, quantity={self.quantity})>"
