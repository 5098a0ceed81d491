# detailing/models/appointment.py
from sqlalchemy import Column, String, Integer, Float, Text, DateTime, JSON, ForeignKey, Uuid
from sqlalchemy.sql import func
import uuid

from detailing.models.base import Base, utcnow


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # References
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    vehicle_ids = Column(JSON, nullable=False, default=list)  # list of vehicle id strings
    service_ids = Column(JSON, nullable=False, default=list)  # list of service id strings

    # Slot
    scheduled_date = Column(String(10), nullable=False, index=True)  # YYYY-MM-DD
    scheduled_time = Column(String(5), nullable=False)  # HH:MM
    duration = Column(Integer, nullable=False)  # total minutes

    # Service location
    street = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(50), nullable=False)
    zip = Column(String(20), nullable=False)
    location_notes = Column(Text, nullable=True)

    # pending, confirmed, in_progress, completed, cancelled, rescheduled
    status = Column(String(20), nullable=False, default="pending", index=True)
    total_price = Column(Float, nullable=False, default=0.0)
    notes = Column(Text, nullable=True)

    created_by = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow)

    def __repr__(self):
        return f"<Appointment(id={self.id}, {self.scheduled_date} {self.scheduled_time})>"
