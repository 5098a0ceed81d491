# detailing/models/invoice.py
from sqlalchemy import Column, String, Integer, Float, Boolean, Text, DateTime, JSON, ForeignKey, Uuid
from sqlalchemy.sql import func
import uuid

from detailing.models.base import Base, utcnow


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    appointment_id = Column(Uuid(as_uuid=True), ForeignKey("appointments.id"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)

    invoice_number = Column(String(20), nullable=False, unique=True, index=True)

    # [{service_id, service_name, quantity, unit_price, total_price}]
    items = Column(JSON, nullable=False, default=list)
    subtotal = Column(Float, nullable=False, default=0.0)
    tax = Column(Float, nullable=False, default=0.0)
    total = Column(Float, nullable=False, default=0.0)

    status = Column(String(20), nullable=False, default="draft", index=True)  # draft, sent, paid, overdue
    due_date = Column(String(10), nullable=False)  # YYYY-MM-DD
    paid_date = Column(String(10), nullable=True)

    # Deposit collected at booking, remainder charged on completion
    deposit_amount = Column(Float, nullable=True)
    deposit_paid = Column(Boolean, default=False, nullable=False)
    remaining_balance = Column(Float, nullable=True)

    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    def __repr__(self):
        return f"<Invoice {self.invoice_number} ({self.status})>"


class InvoiceCounter(Base):
    """Single-row sequence for invoice numbers, incremented under a row lock"""
    __tablename__ = "invoice_counters"

    id = Column(Integer, primary_key=True)
    last_value = Column(Integer, nullable=False, default=0)
