# detailing/models/deposit_settings.py
from sqlalchemy import Column, Integer, Float, Boolean

from detailing.models.base import Base


class DepositSettings(Base):
    __tablename__ = "deposit_settings"

    id = Column(Integer, primary_key=True)
    amount_per_vehicle = Column(Float, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
