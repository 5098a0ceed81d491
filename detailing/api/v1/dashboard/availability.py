# ============================================================================
# detailing/api/v1/dashboard/availability.py
# Slot checks and blocked-time lookups for signed-in users
# ============================================================================
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from datetime import date

from detailing.api.dependencies import get_current_active_user
from detailing.config.database import get_db
from detailing.models.user import User
from detailing.schemas.availability import AvailabilityCheckRequest, AvailabilityResponse
from detailing.services.availability.availability_service import (
    AvailabilityService,
    ScheduleService,
    serialize_time_block,
)

router = APIRouter(prefix="/availability", tags=["availability"])


@router.post("/check", response_model=AvailabilityResponse)
async def check_availability(
        request: AvailabilityCheckRequest,
        current_user: User = Depends(get_current_active_user),
        db: Session = Depends(get_db)
):
    """
    Check whether a slot can be booked.
    Business-rule outcomes come back as available=false with a reason, never as errors.
    """
    return AvailabilityService.check_availability(
        db=db,
        date=request.date.isoformat(),
        start_time=request.start_time,
        duration=request.duration
    )


@router.get("/blocked")
async def get_blocked_times(
        start_date: date = Query(..., description="First day, inclusive"),
        end_date: date = Query(..., description="Last day, inclusive"),
        current_user: User = Depends(get_current_active_user),
        db: Session = Depends(get_db)
):
    blocks = ScheduleService.get_blocked_times(db, start_date.isoformat(), end_date.isoformat())
    return [serialize_time_block(b) for b in blocks]
