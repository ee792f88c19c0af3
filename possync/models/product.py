"""Product model."""
from sqlalchemy import Column, String, Numeric, DateTime, Enum
from possync.database import Base
from possync.models.wire import WireMixin
import enum


class ProductType(enum.Enum):
    """Product type enum."""
    GOOD = "good"
    SERVICE = "service"


class Product(WireMixin, Base):
    """
    Product template.

    A good owns one or more ProductVariant rows and is never sold directly;
    a service has no variants and carries its own price tiers.
    """

    __tablename__ = 'products'
    __wire_table__ = 'products'

    id = Column(String, primary_key=True)
    store_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    type = Column(Enum(ProductType, name='product_type'), nullable=False, default=ProductType.GOOD)
    category_id = Column(String, nullable=True)
    supplier_id = Column(String, nullable=True)
    image = Column(String, nullable=True, default='')
    created_at = Column(DateTime(timezone=True), nullable=True)

    # Price tiers (services only; goods price at variant level)
    price = Column(Numeric(12, 2), nullable=True)
    price_semi_wholesale = Column(Numeric(12, 2), nullable=True)
    price_wholesale = Column(Numeric(12, 2), nullable=True)

    @property
    def is_service(self):
        return self.type == ProductType.SERVICE

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', type={self.type.value if self.type else None})>"
