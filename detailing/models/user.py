# ============================================================================
# FILE: detailing/models/user.py
# Customers and admins, mirrored from the external identity provider
# ============================================================================
from sqlalchemy import Column, String, Integer, Float, Text, DateTime, Uuid, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
import enum

from detailing.models.base import Base, utcnow


class UserRole(str, enum.Enum):
    """Dashboard roles."""
    ADMIN = "admin"     # Business staff - admin dashboard
    CLIENT = "client"   # Customer - customer dashboard


class UserStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Subject claim from the identity provider token
    external_id = Column(String(255), unique=True, nullable=False, index=True)

    name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True, index=True)
    phone = Column(String(30), nullable=True)

    role = Column(
        SQLEnum(UserRole, values_callable=_enum_values, native_enum=False, length=20),
        default=UserRole.CLIENT,
        nullable=False,
        index=True
    )
    status = Column(
        SQLEnum(UserStatus, values_callable=_enum_values, native_enum=False, length=20),
        default=UserStatus.ACTIVE,
        nullable=False
    )

    # Service address
    street = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(50), nullable=True)
    zip = Column(String(20), nullable=True)

    # Customer stats
    times_serviced = Column(Integer, default=0, nullable=False)
    total_spent = Column(Float, default=0.0, nullable=False)
    cancellation_count = Column(Integer, default=0, nullable=False)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow)

    vehicles = relationship("Vehicle", back_populates="owner", cascade="all, delete-orphan")

    def is_admin(self) -> bool:
        """Check if user has the admin role."""
        return self.role == UserRole.ADMIN

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"
