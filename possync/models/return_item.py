"""Return Item model."""
from sqlalchemy import Column, String, Integer, ForeignKey
from sqlalchemy.orm import relationship
from possync.database import Base
from possync.models.wire import WireMixin
from possync.models.line_item import LineItemMixin


class ReturnItem(LineItemMixin, WireMixin, Base):
    """Returned line, same shape as a sale line."""

    __tablename__ = 'return_items'
    __wire_exclude__ = ('return_id', 'position')

    return_id = Column(String, ForeignKey('returns.id', ondelete='CASCADE'), primary_key=True)
    position = Column(Integer, primary_key=True)

    # Relationships
    sale_return = relationship('Return', back_populates='items')

    def __repr__(self):
        return f"<ReturnItem(return_id={self.return_id}, line_id={self.line_id}, quantity={self.quantity})>"
