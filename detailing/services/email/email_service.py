# ===== detailing/services/email/email_service.py =====
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Dict, List, Optional, Any
import logging

from detailing.config.settings import settings

logger = logging.getLogger(__name__)


class EmailService:
    """Service for sending emails via SMTP"""

    @staticmethod
    def _get_smtp_connection():
        """Create and return SMTP connection"""
        try:
            if settings.EMAIL_USE_TLS:
                server = smtplib.SMTP(settings.EMAIL_HOST, settings.EMAIL_PORT)
                server.starttls()
            else:
                server = smtplib.SMTP_SSL(settings.EMAIL_HOST, settings.EMAIL_PORT)

            if settings.EMAIL_USERNAME and settings.EMAIL_PASSWORD:
                server.login(settings.EMAIL_USERNAME, settings.EMAIL_PASSWORD)

            return server
        except Exception as e:
            logger.error(f"Failed to connect to SMTP server: {e}")
            raise

    @staticmethod
    def send_email(
            to_email: str,
            subject: str,
            html_content: str,
            plain_text: Optional[str] = None,
            bcc: Optional[List[str]] = None
    ) -> None:
        """
        Send an email using SMTP.

        Raises on failure so the calling task can retry.
        """
        msg = MIMEMultipart('alternative')
        msg['Subject'] = subject
        msg['From'] = f"{settings.EMAIL_FROM_NAME} <{settings.EMAIL_FROM_ADDRESS}>"
        msg['To'] = to_email

        if plain_text:
            msg.attach(MIMEText(plain_text, 'plain'))
        msg.attach(MIMEText(html_content, 'html'))

        recipients = [to_email] + (bcc or [])

        server = EmailService._get_smtp_connection()
        try:
            server.sendmail(settings.EMAIL_FROM_ADDRESS, recipients, msg.as_string())
        finally:
            server.quit()

        logger.info(f"Email '{subject}' sent to {to_email}")

    # ------------------------------------------------------------------
    # Rendered messages
    # ------------------------------------------------------------------

    @staticmethod
    def send_appointment_confirmation(payload: Dict[str, Any]) -> None:
        services = ", ".join(payload.get("service_names", []))
        plain = (
            f"Hi {payload.get('customer_name') or 'there'},\n\n"
            f"Your {settings.BUSINESS_NAME} appointment is booked for "
            f"{payload['date']} at {payload['display_time']}.\n"
            f"Services: {services}\n"
            f"Location: {payload.get('address', '')}\n"
            f"Total: ${payload['total_price']:.2f}\n"
        )
        html = (
            f"<p>Hi {payload.get('customer_name') or 'there'},</p>"
            f"<p>Your appointment is booked for <strong>{payload['date']}</strong> at "
            f"<strong>{payload['display_time']}</strong>.</p>"
            f"<p>Services: {services}<br>Location: {payload.get('address', '')}<br>"
            f"Total: ${payload['total_price']:.2f}</p>"
        )
        EmailService.send_email(
            to_email=payload["email"],
            subject=f"Appointment confirmation - {payload['date']}",
            html_content=html,
            plain_text=plain,
        )

    @staticmethod
    def send_invoice(payload: Dict[str, Any]) -> None:
        rows = "".join(
            f"<tr><td>{item['service_name']}</td><td>{item['quantity']}</td>"
            f"<td>${item['total_price']:.2f}</td></tr>"
            for item in payload.get("items", [])
        )
        lines = "\n".join(
            f"- {item['service_name']} x{item['quantity']}: ${item['total_price']:.2f}"
            for item in payload.get("items", [])
        )
        plain = (
            f"Invoice {payload['invoice_number']}\n\n{lines}\n\n"
            f"Total: ${payload['total']:.2f}\n"
            f"Deposit paid: ${payload.get('deposit_amount') or 0:.2f}\n"
            f"Due {payload['due_date']}\n"
        )
        html = (
            f"<h2>Invoice {payload['invoice_number']}</h2>"
            f"<table><tr><th>Service</th><th>Qty</th><th>Amount</th></tr>{rows}</table>"
            f"<p>Total: ${payload['total']:.2f}<br>Due {payload['due_date']}</p>"
        )
        EmailService.send_email(
            to_email=payload["email"],
            subject=f"Invoice {payload['invoice_number']} from {settings.BUSINESS_NAME}",
            html_content=html,
            plain_text=plain,
        )

    @staticmethod
    def send_welcome(payload: Dict[str, Any]) -> None:
        name = payload.get("customer_name") or "there"
        EmailService.send_email(
            to_email=payload["email"],
            subject=f"Welcome to {settings.BUSINESS_NAME}",
            html_content=(
                f"<p>Hi {name},</p><p>Thanks for signing up. You can book your next detail at "
                f"<a href=\"{settings.FRONTEND_URL}\">{settings.FRONTEND_URL}</a>.</p>"
            ),
            plain_text=f"Hi {name},\n\nThanks for signing up. Book at {settings.FRONTEND_URL}\n",
        )

    @staticmethod
    def send_status_update(payload: Dict[str, Any]) -> None:
        status_label = payload["status"].replace("_", " ")
        EmailService.send_email(
            to_email=payload["email"],
            subject=f"Your appointment is {status_label}",
            html_content=(
                f"<p>Your appointment on {payload['date']} at {payload['display_time']} "
                f"is now <strong>{status_label}</strong>.</p>"
            ),
            plain_text=f"Your appointment on {payload['date']} at {payload['display_time']} is now {status_label}.",
        )

    @staticmethod
    def send_admin_review_notification(payload: Dict[str, Any]) -> None:
        EmailService.send_email(
            to_email=settings.ADMIN_NOTIFICATION_EMAIL,
            subject=f"New {payload['rating']}-star review from {payload.get('customer_name') or 'a customer'}",
            html_content=f"<p>{payload.get('comment') or '(no comment)'}</p>",
            plain_text=payload.get("comment") or "(no comment)",
        )
