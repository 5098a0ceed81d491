"""
Pydantic schemas for booking and managing appointments
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date
from uuid import UUID

from detailing.schemas.availability import TIME_PATTERN


class LocationSchema(BaseModel):
    street: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=50)
    zip: str = Field(..., min_length=1, max_length=20)
    notes: Optional[str] = None


class AppointmentCreateRequest(BaseModel):
    """
    Schema for booking an appointment.
    customer_id is honored for admins only; clients always book for themselves.
    """
    vehicle_ids: List[UUID] = Field(..., min_length=1)
    service_ids: List[UUID] = Field(..., min_length=1)
    scheduled_date: date
    scheduled_time: str = Field(..., pattern=TIME_PATTERN)
    location: LocationSchema
    notes: Optional[str] = None
    customer_id: Optional[UUID] = None


class AppointmentStatusUpdateRequest(BaseModel):
    status: str = Field(..., pattern=r"^(pending|confirmed|in_progress|completed|cancelled|rescheduled)$")


class AppointmentRescheduleRequest(BaseModel):
    new_date: date
    new_time: str = Field(..., pattern=TIME_PATTERN)
