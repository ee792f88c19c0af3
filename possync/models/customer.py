"""Customer model."""
from sqlalchemy import Column, String
from possync.database import Base
from possync.models.wire import WireMixin


class Customer(WireMixin, Base):
    """Customer. Debt is never stored here, it is derived from sales."""

    __tablename__ = 'customers'
    __wire_table__ = 'customers'

    id = Column(String, primary_key=True)
    store_id = Column(String, nullable=False, index=True)
    name = Column(String(200), nullable=False)
    phone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)

    def __repr__(self):
        return f"<Customer(id={self.id}, name='{self.name}')>"
