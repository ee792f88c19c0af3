"""Sale Item model."""
from sqlalchemy import Column, String, Integer, ForeignKey
from sqlalchemy.orm import relationship
from possync.database import Base
from possync.models.wire import WireMixin
from possync.models.line_item import LineItemMixin


class SaleItem(LineItemMixin, WireMixin, Base):
    """Sale line (embedded in the sale record on the wire)."""

    __tablename__ = 'sale_items'
    __wire_exclude__ = ('sale_id', 'position')

    sale_id = Column(String, ForeignKey('sales.id', ondelete='CASCADE'), primary_key=True)
    position = Column(Integer, primary_key=True)

    # Relationships
    sale = relationship('Sale', back_populates='items')

    def __repr__(self):
        return f"<SaleItem(sale_id={self.sale_id}, line_id={self.line_id}, quantity={self.quantity})>"
