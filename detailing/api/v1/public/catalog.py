# ============================================================================
# detailing/api/v1/public/catalog.py
# Services, published reviews and deposit policy - no authentication
# ============================================================================
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from detailing.config.database import get_db
from detailing.services.catalog.catalog_service import CatalogService, DepositSettingsService
from detailing.services.review.review_service import ReviewService

router = APIRouter(tags=["public-catalog"])


@router.get("/services")
async def list_services(db: Session = Depends(get_db)):
    """Active services, alphabetical"""
    return [CatalogService.serialize_service(s) for s in CatalogService.list_services(db, active_only=True)]


@router.get("/service-categories")
async def list_categories(db: Session = Depends(get_db)):
    return [
        {"id": str(c.id), "name": c.name, "type": c.type}
        for c in CatalogService.list_categories(db)
    ]


@router.get("/reviews")
async def list_public_reviews(db: Session = Depends(get_db)):
    return [ReviewService.serialize(r) for r in ReviewService.list_reviews(db, is_public=True)]


@router.get("/deposit-settings")
async def get_deposit_settings(db: Session = Depends(get_db)):
    return DepositSettingsService.get(db)
