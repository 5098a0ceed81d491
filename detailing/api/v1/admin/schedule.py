# ============================================================================
# detailing/api/v1/admin/schedule.py
# Business hours and time blocks - admin role required
# ============================================================================
from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session
from uuid import UUID

from detailing.api.dependencies import require_admin
from detailing.config.database import get_db
from detailing.models.user import User
from detailing.schemas.availability import BusinessHoursUpdateRequest, TimeBlockCreateRequest
from detailing.services.availability.availability_service import (
    ScheduleService,
    serialize_business_hours,
    serialize_time_block,
)

router = APIRouter(prefix="/schedule", tags=["admin-schedule"])


@router.put("/business-hours")
async def set_business_hours(
        request: BusinessHoursUpdateRequest,
        current_user: User = Depends(require_admin),
        db: Session = Depends(get_db)
):
    """
    Replace the weekly schedule.
    Weekdays missing from the payload are removed (closed).
    """
    hours = ScheduleService.set_business_hours(
        db=db,
        schedule=[day.model_dump() for day in request.schedule],
        user=current_user
    )
    return [serialize_business_hours(h) for h in hours]


@router.post("/time-blocks", status_code=201)
async def add_time_block(
        request: TimeBlockCreateRequest,
        current_user: User = Depends(require_admin),
        db: Session = Depends(get_db)
):
    """
    Block out part of a day. Already-booked appointments inside the block are
    not cancelled; their ids come back in conflicting_appointment_ids.
    """
    result = ScheduleService.add_time_block(
        db=db,
        date=request.date.isoformat(),
        start_time=request.start_time,
        end_time=request.end_time,
        reason=request.reason,
        type=request.type,
        user=current_user
    )
    return {
        "block": serialize_time_block(result["block"]),
        "conflicting_appointment_ids": result["conflicting_appointment_ids"],
    }


@router.delete("/time-blocks/{block_id}", status_code=204)
async def delete_time_block(
        block_id: UUID = Path(..., description="The time block ID"),
        current_user: User = Depends(require_admin),
        db: Session = Depends(get_db)
):
    ScheduleService.delete_time_block(db, block_id, current_user)
