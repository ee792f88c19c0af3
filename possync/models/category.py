"""Category model."""
from sqlalchemy import Column, String
from possync.database import Base
from possync.models.wire import WireMixin


class Category(WireMixin, Base):
    """Product Category."""

    __tablename__ = 'categories'
    __wire_table__ = 'categories'

    id = Column(String, primary_key=True)
    store_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)

    def __repr__(self):
        return f"<Category(id={self.id}, name='{self.name}')>"
