# ============================================================================
# detailing/api/v1/dashboard/account.py
# Profile, vehicles, invoices and reviews of the signed-in customer
# ============================================================================
from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session
from uuid import UUID

from detailing.api.dependencies import get_current_active_user
from detailing.config.database import get_db
from detailing.models.user import User
from detailing.schemas.catalog import VehicleCreateRequest
from detailing.schemas.review import ReviewCreateRequest
from detailing.schemas.user import ProfileUpdateRequest
from detailing.services.appointment.appointment_service import AppointmentService
from detailing.services.catalog.catalog_service import VehicleService
from detailing.services.invoice.invoice_service import InvoiceService
from detailing.services.review.review_service import ReviewService
from detailing.services.user.user_service import CustomerService

router = APIRouter(tags=["dashboard-account"])


@router.get("/me")
async def get_profile(current_user: User = Depends(get_current_active_user)):
    return CustomerService.serialize(current_user)


@router.patch("/me")
async def update_profile(
        request: ProfileUpdateRequest,
        current_user: User = Depends(get_current_active_user),
        db: Session = Depends(get_db)
):
    """Update your own name, contact details and service address."""
    user = CustomerService.update_user(db, current_user.id, request.model_dump(exclude_unset=True), current_user)
    return CustomerService.serialize(user)


# ============================================================================
# Vehicles
# ============================================================================

@router.get("/vehicles")
async def list_vehicles(
        current_user: User = Depends(get_current_active_user),
        db: Session = Depends(get_db)
):
    return [VehicleService.serialize(v) for v in VehicleService.list_vehicles(db, current_user)]


@router.post("/vehicles", status_code=201)
async def add_vehicle(
        request: VehicleCreateRequest,
        current_user: User = Depends(get_current_active_user),
        db: Session = Depends(get_db)
):
    vehicle = VehicleService.add_vehicle(db, current_user, request.model_dump())
    return VehicleService.serialize(vehicle)


@router.delete("/vehicles/{vehicle_id}", status_code=204)
async def delete_vehicle(
        vehicle_id: UUID = Path(..., description="The vehicle ID"),
        current_user: User = Depends(get_current_active_user),
        db: Session = Depends(get_db)
):
    VehicleService.delete_vehicle(db, vehicle_id, current_user)


# ============================================================================
# Invoices
# ============================================================================

@router.get("/invoices")
async def list_my_invoices(
        current_user: User = Depends(get_current_active_user),
        db: Session = Depends(get_db)
):
    return [InvoiceService.serialize(i) for i in InvoiceService.get_user_invoices(db, current_user)]


@router.get("/invoices/{invoice_id}")
async def get_invoice(
        invoice_id: UUID = Path(..., description="The invoice ID"),
        current_user: User = Depends(get_current_active_user),
        db: Session = Depends(get_db)
):
    return InvoiceService.serialize(InvoiceService.get_invoice(db, invoice_id, current_user))


# ============================================================================
# Reviews
# ============================================================================

@router.post("/reviews", status_code=201)
async def submit_review(
        request: ReviewCreateRequest,
        current_user: User = Depends(get_current_active_user),
        db: Session = Depends(get_db)
):
    review = ReviewService.submit_review(
        db=db,
        appointment_id=request.appointment_id,
        rating=request.rating,
        user=current_user,
        comment=request.comment,
        is_public=request.is_public
    )
    return ReviewService.serialize(review)


@router.get("/reviews")
async def list_my_reviews(
        current_user: User = Depends(get_current_active_user),
        db: Session = Depends(get_db)
):
    return [ReviewService.serialize(r) for r in ReviewService.get_by_user(db, current_user.id, current_user)]


@router.get("/reviews/user/{user_id}")
async def list_reviews_for_user(
        user_id: UUID = Path(..., description="The customer's user ID"),
        current_user: User = Depends(get_current_active_user),
        db: Session = Depends(get_db)
):
    return [ReviewService.serialize(r) for r in ReviewService.get_by_user(db, user_id, current_user)]


@router.get("/reviews/pending")
async def list_pending_reviews(
        current_user: User = Depends(get_current_active_user),
        db: Session = Depends(get_db)
):
    """Completed appointments you have not reviewed yet."""
    return [
        AppointmentService.serialize(db, a)
        for a in ReviewService.get_pending_reviews(db, current_user)
    ]
