"""Expense model."""
from sqlalchemy import Column, String, Numeric, DateTime
from possync.database import Base
from possync.models.wire import WireMixin


class Expense(WireMixin, Base):
    """Operating expense, only used by the finance summary."""

    __tablename__ = 'expenses'
    __wire_table__ = 'expenses'

    id = Column(String, primary_key=True)
    store_id = Column(String, nullable=False, index=True)
    description = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    date = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<Expense(id={self.id}, amount={self.amount})>"
