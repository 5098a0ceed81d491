"""
Pydantic schemas for availability checks and schedule administration
"""
from pydantic import BaseModel, Field
from typing import Optional, List
import datetime

TIME_PATTERN = r"^\d{2}:\d{2}$"


# ============================================================================
# Request Schemas
# ============================================================================

class AvailabilityCheckRequest(BaseModel):
    """Can [start_time, start_time + duration) on `date` be booked?"""
    date: datetime.date
    start_time: str = Field(..., pattern=TIME_PATTERN, description="Slot start, HH:MM")
    duration: int = Field(..., gt=0, description="Duration in minutes")


class BusinessHoursDay(BaseModel):
    day_of_week: int = Field(..., ge=0, le=6, description="0=Sunday ... 6=Saturday")
    start_time: str = Field(..., pattern=TIME_PATTERN)
    end_time: str = Field(..., pattern=TIME_PATTERN)
    is_active: bool = True


class BusinessHoursUpdateRequest(BaseModel):
    """Full weekly schedule; weekdays left out are closed."""
    schedule: List[BusinessHoursDay]


class TimeBlockCreateRequest(BaseModel):
    date: datetime.date
    start_time: str = Field(..., pattern=TIME_PATTERN)
    end_time: str = Field(..., pattern=TIME_PATTERN)
    reason: str = Field(..., min_length=1, max_length=255)
    type: str = Field("other", pattern=r"^(time_off|maintenance|other)$")


# ============================================================================
# Response Schemas
# ============================================================================

class AvailabilityResponse(BaseModel):
    available: bool
    reason: Optional[str] = None
