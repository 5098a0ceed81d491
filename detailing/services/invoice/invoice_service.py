# ============================================================================
# detailing/services/invoice/invoice_service.py
# ============================================================================
"""Invoice numbering, status changes and summaries"""
from datetime import date, timedelta
from typing import Any, Dict, List, Optional
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from detailing.config.settings import get_settings
from detailing.core.exceptions import AccessDeniedError, NotFoundError, ValidationError
from detailing.models.appointment import Appointment
from detailing.models.deposit_settings import DepositSettings
from detailing.models.invoice import Invoice, InvoiceCounter
from detailing.models.service import Service
from detailing.models.user import User
from detailing.utils.time_utils import parse_date

logger = logging.getLogger(__name__)
settings = get_settings()

INVOICE_STATUSES = ("draft", "sent", "paid", "overdue")


class InvoiceService:
    """Service layer for invoice-related business logic."""

    @staticmethod
    def next_invoice_number(db: Session) -> str:
        """
        Draw the next number from the counter row. The row is locked until the
        caller's transaction commits, so concurrent bookings get distinct numbers.
        """
        counter = db.query(InvoiceCounter).filter(InvoiceCounter.id == 1).with_for_update().first()
        if counter is None:
            counter = InvoiceCounter(id=1, last_value=0)
            db.add(counter)
            db.flush()

        counter.last_value += 1
        return f"INV-{counter.last_value:04d}"

    @staticmethod
    def deposit_per_vehicle(db: Session) -> float:
        deposit_settings = db.query(DepositSettings).first()
        if deposit_settings and deposit_settings.is_active:
            return deposit_settings.amount_per_vehicle
        return settings.DEFAULT_DEPOSIT_PER_VEHICLE

    @staticmethod
    def build_for_appointment(
            db: Session,
            appointment: Appointment,
            services: List[Service],
            vehicle_size: str,
            vehicle_count: int
    ) -> Invoice:
        """Create (without committing) the draft invoice for a new booking."""
        items = []
        for service in services:
            unit_price = service.price_for_size(vehicle_size)
            items.append({
                "service_id": str(service.id),
                "service_name": service.name,
                "quantity": vehicle_count,
                "unit_price": unit_price,
                "total_price": round(unit_price * vehicle_count, 2),
            })

        subtotal = round(sum(item["total_price"] for item in items), 2)
        tax = 0.0
        total = subtotal + tax

        # Deposit is capped at the total so the remaining balance never goes negative
        deposit_amount = min(InvoiceService.deposit_per_vehicle(db) * vehicle_count, total)
        remaining_balance = max(0.0, total - deposit_amount)

        due_date = parse_date(appointment.scheduled_date) + timedelta(days=settings.INVOICE_DUE_DAYS)

        invoice = Invoice(
            appointment_id=appointment.id,
            user_id=appointment.user_id,
            invoice_number=InvoiceService.next_invoice_number(db),
            items=items,
            subtotal=subtotal,
            tax=tax,
            total=total,
            status="draft",  # sent once the deposit is paid and the appointment confirmed
            due_date=due_date.isoformat(),
            notes=f"Invoice for appointment on {appointment.scheduled_date}",
            deposit_amount=deposit_amount,
            deposit_paid=False,
            remaining_balance=remaining_balance,
        )
        db.add(invoice)
        return invoice

    @staticmethod
    def get_by_appointment(db: Session, appointment_id: UUID) -> Optional[Invoice]:
        return db.query(Invoice).filter(Invoice.appointment_id == appointment_id).first()

    @staticmethod
    def list_invoices(db: Session, status: Optional[str] = None) -> List[Invoice]:
        query = db.query(Invoice)
        if status:
            query = query.filter(Invoice.status == status)
        return query.order_by(Invoice.created_at.desc(), Invoice.invoice_number.desc()).all()

    @staticmethod
    def get_user_invoices(db: Session, user: User) -> List[Invoice]:
        return db.query(Invoice).filter(
            Invoice.user_id == user.id
        ).order_by(Invoice.created_at.desc(), Invoice.invoice_number.desc()).all()

    @staticmethod
    def get_invoice(db: Session, invoice_id: UUID, user: User) -> Invoice:
        invoice = db.query(Invoice).filter(Invoice.id == invoice_id).first()
        if not invoice:
            raise NotFoundError("Invoice not found")
        if not user.is_admin() and invoice.user_id != user.id:
            raise AccessDeniedError()
        return invoice

    @staticmethod
    def update_status(
            db: Session,
            invoice_id: UUID,
            status: str,
            paid_date: Optional[str] = None
    ) -> Invoice:
        if status not in INVOICE_STATUSES:
            raise ValidationError(f"status must be one of {', '.join(INVOICE_STATUSES)}")

        invoice = db.query(Invoice).filter(Invoice.id == invoice_id).first()
        if not invoice:
            raise NotFoundError("Invoice not found")

        invoice.status = status
        if status == "paid":
            invoice.paid_date = parse_date(paid_date).isoformat() if paid_date else date.today().isoformat()

        db.commit()
        db.refresh(invoice)
        logger.info(f"Invoice {invoice.invoice_number} marked {status}")
        return invoice

    @staticmethod
    def update_deposit_status(
            db: Session,
            invoice_id: UUID,
            deposit_paid: bool,
            status: Optional[str] = None
    ) -> Invoice:
        """Record the outcome reported by the payment processor."""
        if status is not None and status not in INVOICE_STATUSES:
            raise ValidationError(f"status must be one of {', '.join(INVOICE_STATUSES)}")

        invoice = db.query(Invoice).filter(Invoice.id == invoice_id).first()
        if not invoice:
            raise NotFoundError("Invoice not found")

        invoice.deposit_paid = deposit_paid
        if status:
            invoice.status = status

        db.commit()
        db.refresh(invoice)
        logger.info(f"Invoice {invoice.invoice_number} deposit_paid={deposit_paid}")
        return invoice

    @staticmethod
    def delete_invoice(db: Session, invoice_id: UUID) -> None:
        invoice = db.query(Invoice).filter(Invoice.id == invoice_id).first()
        if not invoice:
            raise NotFoundError("Invoice not found")
        if invoice.status == "paid":
            raise ValidationError("Cannot delete a paid invoice.")

        db.delete(invoice)
        db.commit()
        logger.info(f"Invoice {invoice.invoice_number} deleted")

    @staticmethod
    def get_summary_stats(db: Session) -> Dict[str, Any]:
        invoices = db.query(Invoice).all()

        by_status = {status: 0 for status in INVOICE_STATUSES}
        for invoice in invoices:
            by_status[invoice.status] = by_status.get(invoice.status, 0) + 1

        paid_amount = sum(inv.total for inv in invoices if inv.status == "paid")
        outstanding_amount = sum(inv.total for inv in invoices if inv.status in ("sent", "overdue"))
        deposits_collected = sum(inv.deposit_amount or 0 for inv in invoices if inv.deposit_paid)

        return {
            "total_invoices": len(invoices),
            "by_status": by_status,
            "paid_amount": round(paid_amount, 2),
            "outstanding_amount": round(outstanding_amount, 2),
            "deposits_collected": round(deposits_collected, 2),
        }

    @staticmethod
    def serialize(invoice: Invoice) -> Dict[str, Any]:
        return {
            "id": str(invoice.id),
            "appointment_id": str(invoice.appointment_id),
            "user_id": str(invoice.user_id),
            "invoice_number": invoice.invoice_number,
            "items": invoice.items,
            "subtotal": invoice.subtotal,
            "tax": invoice.tax,
            "total": invoice.total,
            "status": invoice.status,
            "due_date": invoice.due_date,
            "paid_date": invoice.paid_date,
            "deposit_amount": invoice.deposit_amount,
            "deposit_paid": invoice.deposit_paid,
            "remaining_balance": invoice.remaining_balance,
            "notes": invoice.notes,
            "created_at": invoice.created_at.isoformat() if invoice.created_at else None,
        }
