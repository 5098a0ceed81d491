# ============================================================================
# detailing/api/v1/admin/catalog.py
# Services catalog, deposit policy and review moderation
# ============================================================================
from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session
from uuid import UUID

from detailing.api.dependencies import require_admin
from detailing.config.database import get_db
from detailing.models.user import User
from detailing.schemas.catalog import (
    CategoryCreateRequest,
    DepositSettingsRequest,
    ServiceCreateRequest,
    ServiceUpdateRequest,
)
from detailing.services.catalog.catalog_service import CatalogService, DepositSettingsService
from detailing.services.review.review_service import ReviewService

router = APIRouter(tags=["admin-catalog"])


@router.get("/services")
async def list_all_services(
        current_user: User = Depends(require_admin),
        db: Session = Depends(get_db)
):
    """All services including inactive ones"""
    return [CatalogService.serialize_service(s) for s in CatalogService.list_services(db, active_only=False)]


@router.post("/services", status_code=201)
async def create_service(
        request: ServiceCreateRequest,
        current_user: User = Depends(require_admin),
        db: Session = Depends(get_db)
):
    return CatalogService.serialize_service(CatalogService.create_service(db, request.model_dump()))


@router.patch("/services/{service_id}")
async def update_service(
        request: ServiceUpdateRequest,
        service_id: UUID = Path(..., description="The service ID"),
        current_user: User = Depends(require_admin),
        db: Session = Depends(get_db)
):
    service = CatalogService.update_service(db, service_id, request.model_dump(exclude_unset=True))
    return CatalogService.serialize_service(service)


@router.post("/service-categories", status_code=201)
async def create_category(
        request: CategoryCreateRequest,
        current_user: User = Depends(require_admin),
        db: Session = Depends(get_db)
):
    category = CatalogService.create_category(db, request.name, request.type)
    return {"id": str(category.id), "name": category.name, "type": category.type}


@router.put("/deposit-settings")
async def update_deposit_settings(
        request: DepositSettingsRequest,
        current_user: User = Depends(require_admin),
        db: Session = Depends(get_db)
):
    return DepositSettingsService.upsert(db, request.amount_per_vehicle, is_active=request.is_active)


@router.get("/reviews")
async def list_reviews(
        current_user: User = Depends(require_admin),
        db: Session = Depends(get_db)
):
    """All reviews, newest first, with customer and appointment details"""
    return ReviewService.list_for_admin(db)


@router.get("/reviews/new-count")
async def get_new_reviews_count(
        current_user: User = Depends(require_admin),
        db: Session = Depends(get_db)
):
    return {"count": ReviewService.get_new_reviews_count(db)}
