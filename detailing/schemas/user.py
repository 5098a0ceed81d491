"""
Pydantic schemas for customer profiles
"""
from pydantic import BaseModel, Field
from typing import Literal, Optional

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class AddressSchema(BaseModel):
    street: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=50)
    zip: str = Field(..., min_length=1, max_length=20)


class ProfileUpdateRequest(BaseModel):
    """
    Schema for a customer editing their own profile.
    All fields are optional - only send what you want to update.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = Field(None, max_length=255, pattern=EMAIL_PATTERN)
    phone: Optional[str] = Field(None, max_length=30)
    address: Optional[AddressSchema] = None


class CustomerUpdateRequest(ProfileUpdateRequest):
    notes: Optional[str] = None
    role: Optional[Literal["admin", "client"]] = None
    status: Optional[Literal["active", "inactive"]] = None
