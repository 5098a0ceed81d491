# ============================================================================
# detailing/api/v1/public/schedule.py
# Unauthenticated booking-grid endpoints for the marketing site
# ============================================================================
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from datetime import date

from detailing.config.database import get_db
from detailing.services.availability.availability_service import (
    AvailabilityService,
    ScheduleService,
    serialize_business_hours,
)

router = APIRouter(tags=["public-schedule"])


@router.get("/availability/slots")
async def get_available_slots(
        date: date = Query(..., description="Day to build the booking grid for (YYYY-MM-DD)"),
        db: Session = Depends(get_db)
):
    """
    Every 15-minute start time between opening and closing, each checked as
    a two-hour block. Empty on closed days.
    """
    return {
        "date": date.isoformat(),
        "slots": AvailabilityService.get_available_time_slots(db, date.isoformat())
    }


@router.get("/business-hours")
async def get_business_hours(db: Session = Depends(get_db)):
    return [serialize_business_hours(h) for h in ScheduleService.get_business_hours(db)]
