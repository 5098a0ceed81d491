# ============================================================================
# detailing/services/notification/notification_service.py
# Builds structured payloads and hands them to the Celery notification queue
# ============================================================================
from typing import Any, Dict, List, Optional
import logging

from celery.exceptions import CeleryError
from kombu.exceptions import KombuError
from sqlalchemy.orm import Session

from detailing.config.settings import get_settings
from detailing.models.appointment import Appointment
from detailing.models.invoice import Invoice
from detailing.models.review import Review
from detailing.models.service import Service
from detailing.models.user import User
from detailing.tasks import notification_tasks
from detailing.utils.ids import as_uuids
from detailing.utils.time_utils import format_display_time

logger = logging.getLogger(__name__)
settings = get_settings()

# Status transitions the customer hears about
LIFECYCLE_STATUSES = {"confirmed", "cancelled", "in_progress", "completed"}


class NotificationService:
    """Enqueues outbound notifications; rendering and delivery happen in workers"""

    @staticmethod
    def _enabled() -> bool:
        if not settings.NOTIFICATIONS_ENABLED:
            logger.debug("Notifications disabled, skipping enqueue")
            return False
        return True

    @staticmethod
    def _enqueue(task, *args) -> bool:
        """Hand a message to the broker; the triggering write is already committed, so never raise."""
        try:
            task.delay(*args)
            return True
        except (KombuError, CeleryError) as e:
            logger.error(f"Failed to enqueue {getattr(task, 'name', task)}: {e}")
            return False

    @staticmethod
    def _service_names(db: Session, service_ids: List[str]) -> List[str]:
        if not service_ids:
            return []
        services = db.query(Service).filter(Service.id.in_(as_uuids(service_ids))).all()
        return [service.name for service in services]

    @staticmethod
    def appointment_payload(db: Session, appointment: Appointment, customer: User) -> Dict[str, Any]:
        return {
            "appointment_id": str(appointment.id),
            "customer_name": customer.name,
            "email": customer.email,
            "phone": customer.phone,
            "date": appointment.scheduled_date,
            "time": appointment.scheduled_time,
            "display_time": format_display_time(appointment.scheduled_time),
            "service_names": NotificationService._service_names(db, appointment.service_ids),
            "address": f"{appointment.street}, {appointment.city}, {appointment.state} {appointment.zip}",
            "total_price": appointment.total_price,
            "status": appointment.status,
        }

    @staticmethod
    def invoice_payload(invoice: Invoice, customer: User) -> Dict[str, Any]:
        return {
            "invoice_id": str(invoice.id),
            "invoice_number": invoice.invoice_number,
            "customer_name": customer.name,
            "email": customer.email,
            "items": invoice.items,
            "subtotal": invoice.subtotal,
            "tax": invoice.tax,
            "total": invoice.total,
            "deposit_amount": invoice.deposit_amount,
            "remaining_balance": invoice.remaining_balance,
            "due_date": invoice.due_date,
        }

    @staticmethod
    def appointment_booked(db: Session, appointment: Appointment, customer: User) -> None:
        if not NotificationService._enabled():
            return
        payload = NotificationService.appointment_payload(db, appointment, customer)
        queued = False
        if customer.email:
            queued = NotificationService._enqueue(notification_tasks.send_appointment_confirmation, payload)
        if customer.phone:
            NotificationService._enqueue(
                notification_tasks.send_sms,
                customer.phone,
                f"{settings.BUSINESS_NAME}: booked for {payload['date']} at {payload['display_time']}."
            )
        if queued:
            logger.info(f"Queued booking confirmation for appointment {appointment.id}")

    @staticmethod
    def appointment_status_changed(db: Session, appointment: Appointment, customer: User) -> None:
        if appointment.status not in LIFECYCLE_STATUSES or not NotificationService._enabled():
            return
        payload = NotificationService.appointment_payload(db, appointment, customer)
        if customer.email:
            NotificationService._enqueue(notification_tasks.send_status_update, payload)
        if customer.phone:
            NotificationService._enqueue(
                notification_tasks.send_sms,
                customer.phone,
                f"{settings.BUSINESS_NAME}: your {payload['date']} appointment is "
                f"{appointment.status.replace('_', ' ')}."
            )

    @staticmethod
    def invoice_issued(invoice: Invoice, customer: User) -> None:
        if not NotificationService._enabled() or not customer.email:
            return
        payload = NotificationService.invoice_payload(invoice, customer)
        if NotificationService._enqueue(notification_tasks.send_invoice_email, payload):
            logger.info(f"Queued invoice email for {invoice.invoice_number}")

    @staticmethod
    def customer_welcome(customer: User) -> None:
        if not NotificationService._enabled() or not customer.email:
            return
        NotificationService._enqueue(notification_tasks.send_welcome_email, {
            "customer_name": customer.name,
            "email": customer.email,
        })

    @staticmethod
    def review_submitted(review: Review, customer: Optional[User]) -> None:
        if not NotificationService._enabled():
            return
        NotificationService._enqueue(notification_tasks.send_admin_review_notification, {
            "review_id": str(review.id),
            "rating": review.rating,
            "comment": review.comment,
            "customer_name": customer.name if customer else None,
        })
