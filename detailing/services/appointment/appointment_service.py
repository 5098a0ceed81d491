# ============================================================================
# detailing/services/appointment/appointment_service.py
# Booking, lifecycle and query logic - no FastAPI dependencies
# ============================================================================
from datetime import date
from typing import Any, Dict, List, Optional
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from detailing.core.exceptions import (
    AccessDeniedError,
    NotFoundError,
    SlotUnavailableError,
    ValidationError,
)
from detailing.models.appointment import Appointment
from detailing.models.invoice import Invoice
from detailing.models.service import Service
from detailing.models.user import User
from detailing.models.vehicle import Vehicle
from detailing.services.availability.availability_service import AvailabilityService
from detailing.services.invoice.invoice_service import InvoiceService
from detailing.services.notification.notification_service import NotificationService
from detailing.utils.ids import as_uuids
from detailing.utils.time_utils import (
    add_minutes,
    day_of_week,
    format_display_time,
    parse_date,
    time_to_minutes,
)

logger = logging.getLogger(__name__)

APPOINTMENT_STATUSES = ("pending", "confirmed", "in_progress", "completed", "cancelled", "rescheduled")


class AppointmentService:
    """Service layer for appointment-related business logic."""

    @staticmethod
    def _get_or_404(db: Session, appointment_id: UUID) -> Appointment:
        appointment = db.query(Appointment).filter(Appointment.id == appointment_id).first()
        if not appointment:
            raise NotFoundError("Appointment not found")
        return appointment

    @staticmethod
    def _lock_and_check(
            db: Session,
            scheduled_date: str,
            scheduled_time: str,
            duration: int,
            exclude_appointment_id: Optional[UUID] = None
    ) -> None:
        """
        Re-validate the slot inside the writing transaction.

        The weekday's BusinessHours row is taken FOR UPDATE first, so two
        bookings for the same day serialize on it and the second one sees the
        first one's appointment.
        """
        AvailabilityService.get_business_hours_for_day(db, day_of_week(scheduled_date), lock=True)
        availability = AvailabilityService.check_availability(
            db, scheduled_date, scheduled_time, duration,
            exclude_appointment_id=exclude_appointment_id
        )
        if not availability["available"]:
            db.rollback()
            logger.warning(
                f"Rejected booking {scheduled_date} {scheduled_time} ({duration}min): {availability['reason']}"
            )
            raise SlotUnavailableError(availability["reason"])

    @staticmethod
    def create_appointment(
            db: Session,
            user: User,
            vehicle_ids: List[str],
            service_ids: List[str],
            scheduled_date: str,
            scheduled_time: str,
            street: str,
            city: str,
            state: str,
            zip: str,
            location_notes: Optional[str] = None,
            notes: Optional[str] = None,
            customer_id: Optional[UUID] = None
    ) -> Appointment:
        """
        Book an appointment and issue its draft invoice in one transaction.

        Clients always book for themselves; admins may pass customer_id.
        Raises SlotUnavailableError when the slot was taken in the meantime.
        """
        if customer_id is not None and customer_id != user.id and not user.is_admin():
            raise AccessDeniedError()

        customer = user
        if customer_id is not None and customer_id != user.id:
            customer = db.query(User).filter(User.id == customer_id).first()
            if not customer:
                raise NotFoundError("Customer not found")

        if not service_ids:
            raise ValidationError("At least one service is required")
        if not vehicle_ids:
            raise ValidationError("At least one vehicle is required")

        date_str = parse_date(scheduled_date).isoformat()
        time_to_minutes(scheduled_time)

        service_uuids = as_uuids(service_ids)
        services_by_id = {
            s.id: s for s in db.query(Service).filter(Service.id.in_(service_uuids)).all()
        }
        missing = [str(sid) for sid in service_uuids if sid not in services_by_id]
        if missing:
            raise NotFoundError(f"Service not found: {', '.join(missing)}")
        services = [services_by_id[sid] for sid in service_uuids]

        vehicle_uuids = as_uuids(vehicle_ids)
        vehicles_by_id = {
            v.id: v for v in db.query(Vehicle).filter(Vehicle.id.in_(vehicle_uuids)).all()
        }
        vehicles = [vehicles_by_id.get(vid) for vid in vehicle_uuids]
        if any(v is None for v in vehicles):
            raise NotFoundError("Vehicle not found")
        if any(v.user_id != customer.id for v in vehicles):
            raise AccessDeniedError("Vehicle does not belong to this customer")

        # Priced by the first vehicle's size, applied to every vehicle
        vehicle_size = vehicles[0].size or "medium"
        vehicle_count = len(vehicles)
        total_price = round(sum(s.price_for_size(vehicle_size) for s in services) * vehicle_count, 2)
        duration = sum(s.duration for s in services)

        AppointmentService._lock_and_check(db, date_str, scheduled_time, duration)

        appointment = Appointment(
            user_id=customer.id,
            vehicle_ids=[str(v.id) for v in vehicles],
            service_ids=[str(s.id) for s in services],
            scheduled_date=date_str,
            scheduled_time=scheduled_time,
            duration=duration,
            street=street,
            city=city,
            state=state,
            zip=zip,
            location_notes=location_notes,
            status="pending",
            total_price=total_price,
            notes=notes,
            created_by=user.id,
        )
        db.add(appointment)
        db.flush()

        invoice = InvoiceService.build_for_appointment(db, appointment, services, vehicle_size, vehicle_count)

        db.commit()
        db.refresh(appointment)

        logger.info(
            f"Appointment {appointment.id} booked for {date_str} {scheduled_time} "
            f"({duration}min, ${total_price:.2f}), invoice {invoice.invoice_number}"
        )

        NotificationService.appointment_booked(db, appointment, customer)
        return appointment

    @staticmethod
    def update_status(db: Session, appointment_id: UUID, status: str, user: User) -> Appointment:
        if not user.is_admin():
            raise AccessDeniedError("Admin access required")
        if status not in APPOINTMENT_STATUSES:
            raise ValidationError(f"status must be one of {', '.join(APPOINTMENT_STATUSES)}")

        appointment = AppointmentService._get_or_404(db, appointment_id)
        previous = appointment.status
        if previous == status:
            return appointment

        customer = db.query(User).filter(User.id == appointment.user_id).first()
        invoice_to_send = None

        if customer:
            if status == "cancelled":
                customer.cancellation_count = (customer.cancellation_count or 0) + 1
            elif previous == "cancelled":
                customer.cancellation_count = max(0, (customer.cancellation_count or 0) - 1)

            if status == "completed":
                customer.times_serviced = (customer.times_serviced or 0) + 1
                customer.total_spent = (customer.total_spent or 0.0) + appointment.total_price
            elif previous == "completed":
                customer.times_serviced = max(0, (customer.times_serviced or 0) - 1)
                customer.total_spent = max(0.0, (customer.total_spent or 0.0) - appointment.total_price)

        if status == "confirmed":
            invoice = InvoiceService.get_by_appointment(db, appointment.id)
            if invoice and invoice.deposit_paid and invoice.status == "draft":
                invoice.status = "sent"
                invoice_to_send = invoice

        appointment.status = status
        db.commit()
        db.refresh(appointment)

        logger.info(f"Appointment {appointment.id} status {previous} -> {status}")

        if customer:
            if invoice_to_send is not None:
                NotificationService.invoice_issued(invoice_to_send, customer)
            NotificationService.appointment_status_changed(db, appointment, customer)

        return appointment

    @staticmethod
    def reschedule(
            db: Session,
            appointment_id: UUID,
            new_date: str,
            new_time: str,
            user: User
    ) -> Appointment:
        appointment = AppointmentService._get_or_404(db, appointment_id)
        if not user.is_admin() and appointment.user_id != user.id:
            raise AccessDeniedError()
        if appointment.status in ("completed", "cancelled"):
            raise ValidationError(f"Cannot reschedule a {appointment.status} appointment")

        date_str = parse_date(new_date).isoformat()
        AppointmentService._lock_and_check(
            db, date_str, new_time, appointment.duration,
            exclude_appointment_id=appointment.id
        )

        old_slot = f"{appointment.scheduled_date} {appointment.scheduled_time}"
        appointment.scheduled_date = date_str
        appointment.scheduled_time = new_time
        appointment.status = "confirmed"
        db.commit()
        db.refresh(appointment)

        logger.info(f"Appointment {appointment.id} rescheduled from {old_slot} to {date_str} {new_time}")

        customer = db.query(User).filter(User.id == appointment.user_id).first()
        if customer:
            NotificationService.appointment_status_changed(db, appointment, customer)
        return appointment

    @staticmethod
    def list_appointments(
            db: Session,
            status: Optional[str] = None,
            scheduled_date: Optional[str] = None
    ) -> List[Appointment]:
        query = db.query(Appointment)
        if status:
            query = query.filter(Appointment.status == status)
        if scheduled_date:
            query = query.filter(Appointment.scheduled_date == parse_date(scheduled_date).isoformat())
        return query.order_by(Appointment.scheduled_date.asc(), Appointment.scheduled_time.asc()).all()

    @staticmethod
    def get_user_appointments(db: Session, user: User, today: Optional[date] = None) -> Dict[str, List[Appointment]]:
        """Split the caller's appointments into upcoming and past."""
        today_str = (today or date.today()).isoformat()
        appointments = db.query(Appointment).filter(
            Appointment.user_id == user.id
        ).order_by(Appointment.scheduled_date.asc(), Appointment.scheduled_time.asc()).all()

        upcoming = [
            a for a in appointments
            if a.scheduled_date >= today_str and a.status not in ("completed", "cancelled")
        ]
        upcoming_ids = {a.id for a in upcoming}
        past = [a for a in reversed(appointments) if a.id not in upcoming_ids]
        return {"upcoming": upcoming, "past": past}

    @staticmethod
    def get_by_user(db: Session, user_id: UUID, user: User) -> List[Appointment]:
        if not user.is_admin() and user.id != user_id:
            raise AccessDeniedError()
        return db.query(Appointment).filter(
            Appointment.user_id == user_id
        ).order_by(Appointment.scheduled_date.desc()).all()

    @staticmethod
    def get_appointment(db: Session, appointment_id: UUID, user: User) -> Appointment:
        appointment = AppointmentService._get_or_404(db, appointment_id)
        if not user.is_admin() and appointment.user_id != user.id:
            raise AccessDeniedError()
        return appointment

    @staticmethod
    def get_calendar_view(db: Session, start_date: str, end_date: str) -> List[Appointment]:
        start = parse_date(start_date).isoformat()
        end = parse_date(end_date).isoformat()
        if end < start:
            raise ValidationError("end_date must not be before start_date")

        return db.query(Appointment).filter(
            Appointment.scheduled_date >= start,
            Appointment.scheduled_date <= end,
            Appointment.status != "cancelled"
        ).order_by(Appointment.scheduled_date.asc(), Appointment.scheduled_time.asc()).all()

    @staticmethod
    def delete_appointment(db: Session, appointment_id: UUID) -> None:
        appointment = AppointmentService._get_or_404(db, appointment_id)

        invoice = InvoiceService.get_by_appointment(db, appointment.id)
        if invoice is not None:
            if invoice.status == "paid":
                raise ValidationError("Cannot delete an appointment with a paid invoice")
            db.delete(invoice)

        db.delete(appointment)
        db.commit()
        logger.info(f"Appointment {appointment_id} deleted")

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    @staticmethod
    def serialize(db: Session, appointment: Appointment, detailed: bool = False) -> Dict[str, Any]:
        data = {
            "id": str(appointment.id),
            "user_id": str(appointment.user_id),
            "vehicle_ids": appointment.vehicle_ids,
            "service_ids": appointment.service_ids,
            "scheduled_date": appointment.scheduled_date,
            "scheduled_time": appointment.scheduled_time,
            "display_time": format_display_time(appointment.scheduled_time),
            "end_time": add_minutes(appointment.scheduled_time, appointment.duration),
            "duration": appointment.duration,
            "status": appointment.status,
            "total_price": appointment.total_price,
            "location": {
                "street": appointment.street,
                "city": appointment.city,
                "state": appointment.state,
                "zip": appointment.zip,
                "notes": appointment.location_notes,
            },
            "notes": appointment.notes,
            "created_at": appointment.created_at.isoformat() if appointment.created_at else None,
        }

        if detailed:
            services = db.query(Service).filter(Service.id.in_(as_uuids(appointment.service_ids))).all()
            vehicles = db.query(Vehicle).filter(Vehicle.id.in_(as_uuids(appointment.vehicle_ids))).all()
            customer = db.query(User).filter(User.id == appointment.user_id).first()
            invoice = db.query(Invoice).filter(Invoice.appointment_id == appointment.id).first()
            data["services"] = [{"id": str(s.id), "name": s.name, "duration": s.duration} for s in services]
            data["vehicles"] = [
                {"id": str(v.id), "year": v.year, "make": v.make, "model": v.model, "size": v.size}
                for v in vehicles
            ]
            data["customer"] = {
                "id": str(customer.id),
                "name": customer.name,
                "email": customer.email,
                "phone": customer.phone,
            } if customer else None
            data["invoice_id"] = str(invoice.id) if invoice else None

        return data
