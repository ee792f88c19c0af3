"""User model - store staff, mirrored without credentials."""
from sqlalchemy import Column, String
from possync.database import Base
from possync.models.wire import WireMixin


class User(WireMixin, Base):
    """
    Store user (admin or seller).

    Passwords and PINs are never copied into the mirror: from_dict only picks
    mapped columns.
    """

    __tablename__ = 'users'
    __wire_table__ = 'users'

    id = Column(String, primary_key=True)
    store_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    email = Column(String(255), nullable=True)
    role = Column(String(20), nullable=False, default='seller')

    def __repr__(self):
        return f"<User(id={self.id}, name='{self.name}', role='{self.role}')>"
