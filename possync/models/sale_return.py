"""Return model."""
from sqlalchemy import Column, String, Numeric, DateTime
from sqlalchemy.orm import relationship
from possync.database import Base
from possync.models.wire import WireMixin


class Return(WireMixin, Base):
    """Customer return. Append-only, individually deletable."""

    __tablename__ = 'returns'
    __wire_table__ = 'returns'

    id = Column(String, primary_key=True)
    store_id = Column(String, nullable=False, index=True)
    user_id = Column(String, nullable=True)
    sale_id = Column(String, nullable=True)
    date = Column(DateTime(timezone=True), nullable=True)
    refund_amount = Column(Numeric(12, 2), nullable=False, default=0)
    profit_lost = Column(Numeric(12, 2), nullable=False, default=0)

    # Relationships
    items = relationship(
        'ReturnItem', back_populates='sale_return', cascade='all, delete-orphan',
        order_by='ReturnItem.position', lazy='selectin'
    )

    @classmethod
    def from_dict(cls, data: dict, **extra):
        from possync.models.return_item import ReturnItem
        sale_return = super().from_dict(data, **extra)
        sale_return.items = [
            ReturnItem.from_dict(item, return_id=sale_return.id, position=position)
            for position, item in enumerate(data.get('items') or [])
        ]
        return sale_return

    def to_dict(self, exclude_none: bool = False) -> dict:
        rv = super().to_dict(exclude_none=exclude_none)
        rv['items'] = [item.to_dict(exclude_none=exclude_none) for item in self.items]
        return rv

    def __repr__(self):
        return f"<Return(id={self.id}, refund_amount={self.refund_amount})>"
