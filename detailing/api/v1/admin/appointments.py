# ============================================================================
# detailing/api/v1/admin/appointments.py
# Appointment and invoice management for staff
# ============================================================================
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session
from datetime import date
from typing import Optional
from uuid import UUID

from detailing.api.dependencies import require_admin
from detailing.config.database import get_db
from detailing.models.user import User
from detailing.schemas.appointment import AppointmentStatusUpdateRequest
from detailing.schemas.invoice import DepositStatusUpdateRequest, InvoiceStatusUpdateRequest
from detailing.services.appointment.appointment_service import AppointmentService
from detailing.services.invoice.invoice_service import InvoiceService

router = APIRouter(tags=["admin-appointments"])


# ============================================================================
# Appointments
# ============================================================================

@router.get("/appointments")
async def list_appointments(
        status: Optional[str] = Query(None, description="Filter by status"),
        scheduled_date: Optional[date] = Query(None, description="Filter by day"),
        current_user: User = Depends(require_admin),
        db: Session = Depends(get_db)
):
    appointments = AppointmentService.list_appointments(
        db,
        status=status,
        scheduled_date=scheduled_date.isoformat() if scheduled_date else None
    )
    return [AppointmentService.serialize(db, a) for a in appointments]


@router.get("/appointments/calendar")
async def get_calendar_view(
        start_date: date = Query(..., description="First day, inclusive"),
        end_date: date = Query(..., description="Last day, inclusive"),
        current_user: User = Depends(require_admin),
        db: Session = Depends(get_db)
):
    """Non-cancelled appointments in the range, for the calendar widget."""
    appointments = AppointmentService.get_calendar_view(db, start_date.isoformat(), end_date.isoformat())
    return [AppointmentService.serialize(db, a, detailed=True) for a in appointments]


@router.patch("/appointments/{appointment_id}/status")
async def update_appointment_status(
        request: AppointmentStatusUpdateRequest,
        appointment_id: UUID = Path(..., description="The appointment ID"),
        current_user: User = Depends(require_admin),
        db: Session = Depends(get_db)
):
    appointment = AppointmentService.update_status(db, appointment_id, request.status, current_user)
    return AppointmentService.serialize(db, appointment)


@router.delete("/appointments/{appointment_id}", status_code=204)
async def delete_appointment(
        appointment_id: UUID = Path(..., description="The appointment ID"),
        current_user: User = Depends(require_admin),
        db: Session = Depends(get_db)
):
    AppointmentService.delete_appointment(db, appointment_id)


# ============================================================================
# Invoices
# ============================================================================

@router.get("/invoices")
async def list_invoices(
        status: Optional[str] = Query(None, description="Filter by status (draft, sent, paid, overdue)"),
        current_user: User = Depends(require_admin),
        db: Session = Depends(get_db)
):
    return [InvoiceService.serialize(i) for i in InvoiceService.list_invoices(db, status=status)]


@router.get("/invoices/summary")
async def get_invoice_summary(
        current_user: User = Depends(require_admin),
        db: Session = Depends(get_db)
):
    return InvoiceService.get_summary_stats(db)


@router.patch("/invoices/{invoice_id}/status")
async def update_invoice_status(
        request: InvoiceStatusUpdateRequest,
        invoice_id: UUID = Path(..., description="The invoice ID"),
        current_user: User = Depends(require_admin),
        db: Session = Depends(get_db)
):
    invoice = InvoiceService.update_status(
        db,
        invoice_id,
        request.status,
        paid_date=request.paid_date.isoformat() if request.paid_date else None
    )
    return InvoiceService.serialize(invoice)


@router.patch("/invoices/{invoice_id}/deposit")
async def update_deposit_status(
        request: DepositStatusUpdateRequest,
        invoice_id: UUID = Path(..., description="The invoice ID"),
        current_user: User = Depends(require_admin),
        db: Session = Depends(get_db)
):
    invoice = InvoiceService.update_deposit_status(db, invoice_id, request.deposit_paid, status=request.status)
    return InvoiceService.serialize(invoice)


@router.delete("/invoices/{invoice_id}", status_code=204)
async def delete_invoice(
        invoice_id: UUID = Path(..., description="The invoice ID"),
        current_user: User = Depends(require_admin),
        db: Session = Depends(get_db)
):
    InvoiceService.delete_invoice(db, invoice_id)
