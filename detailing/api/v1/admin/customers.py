# ============================================================================
# detailing/api/v1/admin/customers.py
# Customer list, customer details and account management
# ============================================================================
from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session
from uuid import UUID

from detailing.api.dependencies import require_admin
from detailing.config.database import get_db
from detailing.models.user import User
from detailing.schemas.user import CustomerUpdateRequest
from detailing.services.user.user_service import CustomerService

router = APIRouter(prefix="/customers", tags=["admin-customers"])


@router.get("")
async def list_customers(
        current_user: User = Depends(require_admin),
        db: Session = Depends(get_db)
):
    """Non-admin users with total bookings, total spent, last visit and location"""
    return CustomerService.list_with_stats(db)


@router.get("/{user_id}")
async def get_customer(
        user_id: UUID = Path(..., description="The customer's user ID"),
        current_user: User = Depends(require_admin),
        db: Session = Depends(get_db)
):
    return CustomerService.get_with_details(db, user_id)


@router.patch("/{user_id}")
async def update_customer(
        request: CustomerUpdateRequest,
        user_id: UUID = Path(..., description="The customer's user ID"),
        current_user: User = Depends(require_admin),
        db: Session = Depends(get_db)
):
    user = CustomerService.update_user(db, user_id, request.model_dump(exclude_unset=True), current_user)
    return CustomerService.serialize(user)


@router.delete("/{user_id}", status_code=204)
async def delete_customer(
        user_id: UUID = Path(..., description="The customer's user ID"),
        current_user: User = Depends(require_admin),
        db: Session = Depends(get_db)
):
    CustomerService.delete_user(db, user_id, current_user)
