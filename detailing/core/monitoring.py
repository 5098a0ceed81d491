"""Health endpoints for load balancers and the admin status page"""
from datetime import datetime, timezone
import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from detailing.config.database import get_db
from detailing.config.redis import get_redis
from detailing.models.availability import BusinessHours

logger = logging.getLogger(__name__)

health_router = APIRouter()


@health_router.get("")
async def health_check():
    return {"status": "healthy", "service": "detailing-api"}


def _check_database(db: Session) -> str:
    try:
        db.execute(text("SELECT 1"))
        return "healthy"
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return f"unhealthy: {e}"


async def _check_redis() -> str:
    try:
        client = await get_redis()
        try:
            await client.ping()
        finally:
            await client.aclose()
        return "healthy"
    except Exception as e:
        logger.error(f"Redis health check failed: {e}")
        return f"unhealthy: {e}"


def _check_schedule(db: Session) -> str:
    """Bookings are impossible until at least one weekday is open."""
    try:
        open_days = db.query(BusinessHours).filter(BusinessHours.is_active.is_(True)).count()
    except Exception as e:
        return f"unhealthy: {e}"
    return "healthy" if open_days else "no business hours configured"


@health_router.get("/detailed")
async def detailed_health_check(db: Session = Depends(get_db)):
    checks = {
        "database": _check_database(db),
        "redis": await _check_redis(),
    }
    if checks["database"] == "healthy":
        checks["schedule"] = _check_schedule(db)

    checks["overall"] = "healthy" if all(v == "healthy" for v in checks.values()) else "degraded"
    checks["checked_at"] = datetime.now(timezone.utc).isoformat()
    return checks
