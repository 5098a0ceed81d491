# ===== detailing/models/availability.py =====
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, Uuid
from sqlalchemy.sql import func
import uuid

from detailing.models.base import Base, utcnow


class BusinessHours(Base):
    """Weekly recurring opening window, at most one row per weekday"""
    __tablename__ = "business_hours"

    id = Column(Integer, primary_key=True)
    day_of_week = Column(Integer, nullable=False, unique=True)  # 0=Sunday, 6=Saturday
    start_time = Column(String(5), nullable=False)  # HH:MM format
    end_time = Column(String(5), nullable=False)  # HH:MM format
    is_active = Column(Boolean, default=True, nullable=False)

    def __repr__(self):
        return f"<BusinessHours(day={self.day_of_week}, {self.start_time}-{self.end_time})>"


class TimeBlock(Base):
    """Ad-hoc closures (time off, maintenance) independent of weekly hours"""
    __tablename__ = "time_blocks"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    date = Column(String(10), nullable=False, index=True)  # YYYY-MM-DD
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    reason = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False)  # time_off, maintenance, other
    created_by = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    def __repr__(self):
        return f"<TimeBlock(date={self.date}, {self.start_time}-{self.end_time})>"
