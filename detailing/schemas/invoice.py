"""
Pydantic schemas for invoices
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import date

INVOICE_STATUS_PATTERN = r"^(draft|sent|paid|overdue)$"


class InvoiceStatusUpdateRequest(BaseModel):
    status: str = Field(..., pattern=INVOICE_STATUS_PATTERN)
    paid_date: Optional[date] = None


class DepositStatusUpdateRequest(BaseModel):
    """Outcome reported by the payment processor"""
    deposit_paid: bool
    status: Optional[str] = Field(None, pattern=INVOICE_STATUS_PATTERN)
