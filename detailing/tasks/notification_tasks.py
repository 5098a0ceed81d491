# ===== detailing/tasks/notification_tasks.py =====
"""Outbound email/SMS delivery, retried with exponential backoff"""
from typing import Any, Dict
import logging

from twilio.rest import Client
from twilio.base.exceptions import TwilioException

from detailing.config.celery_config import celery_app
from detailing.config.settings import get_settings
from detailing.services.email.email_service import EmailService

logger = logging.getLogger(__name__)
settings = get_settings()


def _retry(task, exc, what: str):
    logger.error(f"Failed to send {what}: {exc}")
    # Retry with exponential backoff: 1min, 2min, 4min
    raise task.retry(exc=exc, countdown=60 * (2 ** task.request.retries))


@celery_app.task(bind=True, max_retries=3)
def send_appointment_confirmation(self, payload: Dict[str, Any]):
    """Email the booking confirmation to the customer"""
    try:
        EmailService.send_appointment_confirmation(payload)
        return {"status": "success", "email": payload["email"]}
    except Exception as exc:
        _retry(self, exc, f"appointment confirmation to {payload.get('email')}")


@celery_app.task(bind=True, max_retries=3)
def send_invoice_email(self, payload: Dict[str, Any]):
    """Email an issued invoice with its line items"""
    try:
        EmailService.send_invoice(payload)
        return {"status": "success", "invoice_number": payload["invoice_number"]}
    except Exception as exc:
        _retry(self, exc, f"invoice {payload.get('invoice_number')}")


@celery_app.task(bind=True, max_retries=3)
def send_welcome_email(self, payload: Dict[str, Any]):
    try:
        EmailService.send_welcome(payload)
        return {"status": "success", "email": payload["email"]}
    except Exception as exc:
        _retry(self, exc, f"welcome email to {payload.get('email')}")


@celery_app.task(bind=True, max_retries=3)
def send_status_update(self, payload: Dict[str, Any]):
    try:
        EmailService.send_status_update(payload)
        return {"status": "success", "email": payload["email"]}
    except Exception as exc:
        _retry(self, exc, f"status update to {payload.get('email')}")


@celery_app.task(bind=True, max_retries=3)
def send_admin_review_notification(self, payload: Dict[str, Any]):
    try:
        EmailService.send_admin_review_notification(payload)
        return {"status": "success"}
    except Exception as exc:
        _retry(self, exc, "admin review notification")


@celery_app.task(bind=True, max_retries=3)
def send_sms(self, to_phone: str, body: str):
    """Send a text via Twilio; skipped when Twilio is not configured"""
    if not (settings.TWILIO_ACCOUNT_SID and settings.TWILIO_AUTH_TOKEN and settings.TWILIO_FROM_NUMBER):
        logger.warning(f"Skipping SMS to {to_phone}: Twilio credentials not configured")
        return {"status": "skipped"}

    try:
        client = Client(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)
        message = client.messages.create(body=body, from_=settings.TWILIO_FROM_NUMBER, to=to_phone)
        logger.info(f"SMS sent to {to_phone}: {message.sid}")
        return {"status": "success", "message_sid": message.sid}
    except TwilioException as exc:
        _retry(self, exc, f"SMS to {to_phone}")
