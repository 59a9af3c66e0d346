"""
SQLAlchemy model for the users table.
"""

from datetime import datetime

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship

from carlens.db.session import Base
from carlens.db.base_model import BaseModel

class User(Base, BaseModel):
    """
    Registered account. Rows are created on signup and never updated.
    """
    __tablename__ = "users"

    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    cars = relationship("CarRecord", back_populates="owner")

    def __repr__(self):
        return f"<User {self.id} {self.email}>"
