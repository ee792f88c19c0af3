"""Supplier model."""
from sqlalchemy import Column, String
from possync.database import Base
from possync.models.wire import WireMixin


class Supplier(WireMixin, Base):
    """Supplier. Debt is derived from purchases."""

    __tablename__ = 'suppliers'
    __wire_table__ = 'suppliers'

    id = Column(String, primary_key=True)
    store_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)

    def __repr__(self):
        return f"<Supplier(id={self.id}, name='{self.name}')>"
