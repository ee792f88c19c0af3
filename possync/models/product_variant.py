"""Product Variant model."""
from sqlalchemy import Column, String, Numeric
from possync.database import Base
from possync.models.wire import WireMixin


class ProductVariant(WireMixin, Base):
    """Sellable configuration of a good (size, color...). Stock is tracked per variant."""

    __tablename__ = 'product_variants'
    __wire_table__ = 'productVariants'

    id = Column(String, primary_key=True)
    store_id = Column(String, nullable=False, index=True)
    # No FK: the product cascade is driven by the client, not by the mirror schema
    product_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    price = Column(Numeric(12, 2), nullable=False, default=0)
    price_semi_wholesale = Column(Numeric(12, 2), nullable=True)
    price_wholesale = Column(Numeric(12, 2), nullable=True)
    purchase_price = Column(Numeric(12, 2), nullable=False, default=0)
    barcode = Column(String, nullable=True, index=True)
    low_stock_threshold = Column(Numeric(12, 3), nullable=False, default=0)
    image = Column(String, nullable=True, default='')

    def __repr__(self):
        return f"<ProductVariant(id={self.id}, product_id={self.product_id}, name='{self.name}')>"
