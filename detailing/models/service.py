# detailing/models/service.py
"""Detailing services catalog"""
from sqlalchemy import Column, String, Integer, Float, Boolean, Text, JSON, ForeignKey, Uuid
from sqlalchemy.orm import relationship
import uuid

from detailing.models.base import Base


class ServiceCategory(Base):
    __tablename__ = "service_categories"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    type = Column(String(20), nullable=False, default="standard")  # standard, subscription

    services = relationship("Service", back_populates="category")


class Service(Base):
    __tablename__ = "services"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")

    # Pricing per vehicle size; base_price is the legacy flat price
    base_price = Column(Float, nullable=False, default=0.0)
    base_price_small = Column(Float, nullable=True)
    base_price_medium = Column(Float, nullable=True)
    base_price_large = Column(Float, nullable=True)

    duration = Column(Integer, nullable=False)  # minutes
    category_id = Column(Uuid(as_uuid=True), ForeignKey("service_categories.id"), nullable=True)
    features = Column(JSON, default=list)
    icon = Column(String(20), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    category = relationship("ServiceCategory", back_populates="services")

    def price_for_size(self, size: str) -> float:
        """Unit price for a vehicle size, falling back to medium then base price."""
        if size == "small":
            return self.base_price_small or self.base_price_medium or self.base_price or 0.0
        if size == "large":
            return self.base_price_large or self.base_price_medium or self.base_price or 0.0
        return self.base_price_medium or self.base_price or 0.0

    def __repr__(self):
        return f"<Service(id={self.id}, name={self.name})>"
