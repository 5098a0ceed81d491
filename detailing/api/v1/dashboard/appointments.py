# ============================================================================
# detailing/api/v1/dashboard/appointments.py
# Customer appointment endpoints - thin HTTP layer
# ============================================================================
from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session
from uuid import UUID

from detailing.api.dependencies import get_current_active_user
from detailing.config.database import get_db
from detailing.models.user import User
from detailing.schemas.appointment import AppointmentCreateRequest, AppointmentRescheduleRequest
from detailing.services.appointment.appointment_service import AppointmentService

router = APIRouter(prefix="/appointments", tags=["dashboard-appointments"])


@router.post("", status_code=201)
async def create_appointment(
        request: AppointmentCreateRequest,
        current_user: User = Depends(get_current_active_user),
        db: Session = Depends(get_db)
):
    """
    Book an appointment. The slot is re-validated when the booking is written;
    a slot taken in the meantime returns 409 with the reason.
    """
    appointment = AppointmentService.create_appointment(
        db=db,
        user=current_user,
        vehicle_ids=request.vehicle_ids,
        service_ids=request.service_ids,
        scheduled_date=request.scheduled_date.isoformat(),
        scheduled_time=request.scheduled_time,
        street=request.location.street,
        city=request.location.city,
        state=request.location.state,
        zip=request.location.zip,
        location_notes=request.location.notes,
        notes=request.notes,
        customer_id=request.customer_id
    )
    return AppointmentService.serialize(db, appointment, detailed=True)


@router.get("")
async def get_my_appointments(
        current_user: User = Depends(get_current_active_user),
        db: Session = Depends(get_db)
):
    """Your appointments, split into upcoming and past."""
    split = AppointmentService.get_user_appointments(db, current_user)
    return {
        "upcoming": [AppointmentService.serialize(db, a) for a in split["upcoming"]],
        "past": [AppointmentService.serialize(db, a) for a in split["past"]],
    }


@router.get("/user/{user_id}")
async def get_appointments_for_user(
        user_id: UUID = Path(..., description="The customer's user ID"),
        current_user: User = Depends(get_current_active_user),
        db: Session = Depends(get_db)
):
    return [
        AppointmentService.serialize(db, a)
        for a in AppointmentService.get_by_user(db, user_id, current_user)
    ]


@router.get("/{appointment_id}")
async def get_appointment(
        appointment_id: UUID = Path(..., description="The appointment ID"),
        current_user: User = Depends(get_current_active_user),
        db: Session = Depends(get_db)
):
    appointment = AppointmentService.get_appointment(db, appointment_id, current_user)
    return AppointmentService.serialize(db, appointment, detailed=True)


@router.post("/{appointment_id}/reschedule")
async def reschedule_appointment(
        request: AppointmentRescheduleRequest,
        appointment_id: UUID = Path(..., description="The appointment ID"),
        current_user: User = Depends(get_current_active_user),
        db: Session = Depends(get_db)
):
    appointment = AppointmentService.reschedule(
        db=db,
        appointment_id=appointment_id,
        new_date=request.new_date.isoformat(),
        new_time=request.new_time,
        user=current_user
    )
    return AppointmentService.serialize(db, appointment)
