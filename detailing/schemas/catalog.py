"""
Pydantic schemas for the services catalog, vehicles and deposit settings
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from uuid import UUID


# ============================================================================
# Services
# ============================================================================

class ServiceCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    base_price: float = Field(0.0, ge=0)
    base_price_small: Optional[float] = Field(None, ge=0)
    base_price_medium: Optional[float] = Field(None, ge=0)
    base_price_large: Optional[float] = Field(None, ge=0)
    duration: int = Field(..., gt=0, description="Duration in minutes")
    category_id: Optional[UUID] = None
    features: List[str] = Field(default_factory=list)
    icon: Optional[str] = Field(None, max_length=20)
    is_active: bool = True


class ServiceUpdateRequest(BaseModel):
    """
    Schema for updating a service.
    All fields are optional - only send what you want to update.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    base_price: Optional[float] = Field(None, ge=0)
    base_price_small: Optional[float] = Field(None, ge=0)
    base_price_medium: Optional[float] = Field(None, ge=0)
    base_price_large: Optional[float] = Field(None, ge=0)
    duration: Optional[int] = Field(None, gt=0)
    category_id: Optional[UUID] = None
    features: Optional[List[str]] = None
    icon: Optional[str] = Field(None, max_length=20)
    is_active: Optional[bool] = None


class CategoryCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    type: str = Field("standard", pattern=r"^(standard|subscription)$")


# ============================================================================
# Vehicles
# ============================================================================

class VehicleCreateRequest(BaseModel):
    year: int = Field(..., ge=1900, le=2100)
    make: str = Field(..., min_length=1, max_length=100)
    model: str = Field(..., min_length=1, max_length=100)
    size: str = Field("medium", pattern=r"^(small|medium|large)$")
    color: Optional[str] = Field(None, max_length=50)
    license_plate: Optional[str] = Field(None, max_length=20)
    notes: Optional[str] = None


# ============================================================================
# Deposit settings
# ============================================================================

class DepositSettingsRequest(BaseModel):
    amount_per_vehicle: float = Field(..., ge=0)
    is_active: Optional[bool] = None
