# detailing/models/review.py
from sqlalchemy import Column, String, Integer, Boolean, Text, DateTime, ForeignKey, Uuid
from sqlalchemy.sql import func
import uuid

from detailing.models.base import Base, utcnow


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    # One review per appointment is enforced by the service layer only
    appointment_id = Column(Uuid(as_uuid=True), ForeignKey("appointments.id"), nullable=False, index=True)

    rating = Column(Integer, nullable=False)  # 1-5 stars
    comment = Column(Text, nullable=True)
    is_public = Column(Boolean, default=True, nullable=False)
    review_date = Column(String(40), nullable=False)  # ISO timestamp
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
