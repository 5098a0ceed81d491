# ============================================================================
# FILE: detailing/services/user/user_service.py
# Customer records - admin customer list, details, profile edits, deletion
# ============================================================================
from typing import Any, Dict, List
from uuid import UUID
import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from detailing.core.exceptions import AccessDeniedError, NotFoundError, ValidationError
from detailing.models.appointment import Appointment
from detailing.models.invoice import Invoice
from detailing.models.review import Review
from detailing.models.user import User, UserRole, UserStatus
from detailing.models.vehicle import Vehicle
from detailing.services.appointment.appointment_service import AppointmentService
from detailing.services.catalog.catalog_service import VehicleService
from detailing.services.invoice.invoice_service import InvoiceService

logger = logging.getLogger(__name__)

# Editable by the customer themselves
PROFILE_FIELDS = ("name", "email", "phone", "street", "city", "state", "zip")
# Editable by admins only
ADMIN_FIELDS = ("notes", "role", "status")
ADDRESS_FIELDS = ("street", "city", "state", "zip")


class CustomerService:
    """Service layer for customer records."""

    @staticmethod
    def get_user(db: Session, user_id: UUID) -> User:
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    def list_with_stats(db: Session) -> List[Dict[str, Any]]:
        """
        Non-admin users with booking statistics for the admin customer list.

        total_bookings counts appointments that were not cancelled;
        last_visit is the date of the latest completed appointment.
        """
        customers = db.query(User).filter(User.role != UserRole.ADMIN).all()

        bookings = dict(
            db.query(Appointment.user_id, func.count(Appointment.id))
            .filter(Appointment.status != "cancelled")
            .group_by(Appointment.user_id)
            .all()
        )
        last_visits = dict(
            db.query(Appointment.user_id, func.max(Appointment.scheduled_date))
            .filter(Appointment.status == "completed")
            .group_by(Appointment.user_id)
            .all()
        )

        results = []
        for customer in customers:
            data = CustomerService.serialize(customer)
            data["total_bookings"] = bookings.get(customer.id, 0)
            data["last_visit"] = last_visits.get(customer.id)
            data["location"] = (
                f"{customer.city}, {customer.state}" if customer.city else "No address"
            )
            results.append(data)

        return sorted(results, key=lambda c: (c["name"] or "").lower())

    @staticmethod
    def get_with_details(db: Session, user_id: UUID) -> Dict[str, Any]:
        """Customer record with vehicles, appointments and invoices."""
        customer = CustomerService.get_user(db, user_id)

        appointments = db.query(Appointment).filter(
            Appointment.user_id == customer.id
        ).order_by(Appointment.scheduled_date.desc(), Appointment.scheduled_time.desc()).all()
        invoices = InvoiceService.get_user_invoices(db, customer)
        vehicles = db.query(Vehicle).filter(Vehicle.user_id == customer.id).all()

        return {
            "user": CustomerService.serialize(customer),
            "appointments": [AppointmentService.serialize(db, a, detailed=True) for a in appointments],
            "invoices": [InvoiceService.serialize(i) for i in invoices],
            "vehicles": [VehicleService.serialize(v) for v in vehicles],
        }

    @staticmethod
    def update_user(db: Session, user_id: UUID, data: Dict[str, Any], actor: User) -> User:
        """
        Partial update of a user record.

        Customers may edit their own profile and address. Admins may edit
        anyone and additionally set notes, role and status. Admin-only keys
        sent by a customer are ignored.
        """
        if not actor.is_admin() and actor.id != user_id:
            raise AccessDeniedError()
        user = CustomerService.get_user(db, user_id)

        updates = dict(data)
        address = updates.pop("address", None)
        if address:
            updates.update({key: address.get(key) for key in ADDRESS_FIELDS})

        allowed = PROFILE_FIELDS + ADMIN_FIELDS if actor.is_admin() else PROFILE_FIELDS
        updates = {key: value for key, value in updates.items() if key in allowed}

        if updates.get("email"):
            updates["email"] = updates["email"].strip().lower()
        if updates.get("role") is not None:
            try:
                updates["role"] = UserRole(updates["role"])
            except ValueError:
                raise ValidationError("role must be admin or client")
            if user.id == actor.id and updates["role"] != user.role:
                raise ValidationError("Admins cannot change their own role")
        if updates.get("status") is not None:
            try:
                updates["status"] = UserStatus(updates["status"])
            except ValueError:
                raise ValidationError("status must be active or inactive")

        for key, value in updates.items():
            setattr(user, key, value)

        db.commit()
        db.refresh(user)
        logger.info(f"User {user.id} updated by {actor.id}: {sorted(updates)}")
        return user

    @staticmethod
    def delete_user(db: Session, user_id: UUID, actor: User) -> None:
        """
        Delete a customer with their vehicles, appointments, invoices and reviews.

        Refused while any of their invoices is paid; paid invoices are kept
        as financial records.
        """
        if not actor.is_admin():
            raise AccessDeniedError("Admin access required")
        if actor.id == user_id:
            raise ValidationError("Admins cannot delete their own account")

        user = CustomerService.get_user(db, user_id)
        if user.is_admin():
            raise ValidationError("Change the admin's role to client before deleting")

        paid =db.query(Invoice).filter(Invoice.user_id == user.id, Invoice.status == "paid").count()
        if paid:
            raise ValidationError("Cannot delete a customer with paid invoices")

        appointment_ids = [a.id for a in db.query(Appointment.id).filter(Appointment.user_id == user.id)]

        db.query(Review).filter(Review.user_id == user.id).delete(synchronize_session=False)
        db.query(Invoice).filter(Invoice.user_id == user.id).delete(synchronize_session=False)
        if appointment_ids:
            db.query(Appointment).filter(
                Appointment.id.in_(appointment_ids)
            ).delete(synchronize_session=False)
        db.delete(user)
        db.commit()

        logger.info(
            f"User {user_id} deleted by {actor.id} with {len(appointment_ids)} appointment(s)"
        )

    @staticmethod
    def serialize(user: User) -> Dict[str, Any]:
        return {
            "id": str(user.id),
            "name": user.name,
            "email": user.email,
            "phone": user.phone,
            "role": user.role.value,
            "status": user.status.value,
            "address": {
                "street": user.street,
                "city": user.city,
                "state": user.state,
                "zip": user.zip,
            },
            "times_serviced": user.times_serviced,
            "total_spent": user.total_spent,
            "cancellation_count": user.cancellation_count,
            "notes": user.notes,
            "created_at": user.created_at.isoformat() if user.created_at else None,
        }
