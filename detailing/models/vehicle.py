# detailing/models/vehicle.py
from sqlalchemy import Column, String, Integer, Text, ForeignKey, Uuid
from sqlalchemy.orm import relationship
import uuid

from detailing.models.base import Base


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    year = Column(Integer, nullable=False)
    make = Column(String(100), nullable=False)
    model = Column(String(100), nullable=False)
    size = Column(String(10), default="medium")  # small, medium, large - drives pricing
    color = Column(String(50), nullable=True)
    license_plate = Column(String(20), nullable=True)
    notes = Column(Text, nullable=True)

    owner = relationship("User", back_populates="vehicles")

    def __repr__(self):
        return f"<Vehicle {self.year} {self.make} {self.model}>"
