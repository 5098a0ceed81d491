# detailing/api/v1/admin/analytics.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from detailing.api.dependencies import require_admin
from detailing.config.database import get_db
from detailing.models.user import User
from detailing.services.analytics.analytics_service import AnalyticsService

router = APIRouter(prefix="/analytics", tags=["admin-analytics"])


@router.get("/monthly")
async def get_monthly_stats(
        current_user: User = Depends(require_admin),
        db: Session = Depends(get_db)
):
    """This month against last month: revenue, bookings, deposits, customers."""
    return AnalyticsService.get_monthly_stats(db)


@router.get("/dashboard")
async def get_dashboard_analytics(
        months: int = Query(6, ge=1, le=24, description="Number of trailing months in the chart"),
        current_user: User = Depends(require_admin),
        db: Session = Depends(get_db)
):
    return AnalyticsService.get_dashboard_analytics(db, months=months)
