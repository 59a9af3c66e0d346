from datetime import datetime

from sqlalchemy import Column, String, Text, DateTime, Integer, ForeignKey
from sqlalchemy.orm import relationship

from carlens.db.session import Base
from carlens.db.base_model import BaseModel

class CarRecord(Base, BaseModel):
    """
    One uploaded car image and the metadata the AI returned for it.
    The image itself lives on disk under the owner's upload directory.
    """
    __tablename__ = "cars"

    filename = Column(String(255), nullable=False)
    url = Column(String(512), nullable=False)  # Public path, e.g. /cars/2/1723453230000-car.jpg
    owner_id = Column("user_id", Integer, ForeignKey("users.id"), nullable=False, index=True)
    car_info = Column(Text, nullable=True)  # JSON text
    uploaded_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    owner = relationship("User", back_populates="cars")

    def __repr__(self):
        return f"<CarRecord {self.id} {self.filename} of user {self.owner_id}>"
