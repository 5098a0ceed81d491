# detailing/models/__init__.py
from .base import Base
from .user import User, UserRole, UserStatus
from .vehicle import Vehicle
from .service import Service, ServiceCategory
from .availability import BusinessHours, TimeBlock
from .appointment import Appointment
from .invoice import Invoice, InvoiceCounter
from .review import Review
from .deposit_settings import DepositSettings

__all__ = [
    "Base",
    "User",
    "UserRole",
    "UserStatus",
    "Vehicle",
    "Service",
    "ServiceCategory",
    "BusinessHours",
    "TimeBlock",
    "Appointment",
    "Invoice",
    "InvoiceCounter",
    "Review",
    "DepositSettings",
]
