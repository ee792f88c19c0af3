"""Stock Batch model."""
from sqlalchemy import Column, String, Numeric, DateTime
from possync.database import Base
from possync.models.wire import WireMixin


class StockBatch(WireMixin, Base):
    """Append-only stock intake for a variant (quantity is always positive)."""

    __tablename__ = 'stock_batches'
    __wire_table__ = 'stockBatches'

    id = Column(String, primary_key=True)
    store_id = Column(String, nullable=False, index=True)
    variant_id = Column(String, nullable=False, index=True)
    quantity = Column(Numeric(12, 3), nullable=False)
    purchase_price = Column(Numeric(12, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<StockBatch(id={self.id}, variant_id={self.variant_id}, quantity={self.quantity})>"
