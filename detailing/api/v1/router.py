"""
API v1 router setup
Organized into: public, dashboard (JWT) and admin (JWT + admin role) routes
"""
from fastapi import APIRouter

from detailing.api.v1.public import schedule as public_schedule, catalog as public_catalog
from detailing.api.v1.dashboard import availability, appointments, account
from detailing.api.v1.admin import (
    schedule as admin_schedule,
    analytics,
    appointments as admin_appointments,
    catalog as admin_catalog,
    customers,
)

api_v1_router = APIRouter()

# ============================================================================
# PUBLIC ROUTES (No authentication required)
# ============================================================================
api_v1_router.include_router(public_schedule.router, prefix="/public", tags=["Public"])
api_v1_router.include_router(public_catalog.router, prefix="/public", tags=["Public"])

# ============================================================================
# DASHBOARD ROUTES (JWT authentication required)
# ============================================================================
api_v1_router.include_router(
    availability.router,
    # No prefix needed - availability.router already has "/availability" prefix
    tags=["Dashboard"]
)
api_v1_router.include_router(appointments.router, prefix="/dashboard", tags=["Dashboard"])
api_v1_router.include_router(account.router, prefix="/dashboard", tags=["Dashboard"])

# ============================================================================
# ADMIN ROUTES (JWT authentication + admin role required)
# ============================================================================
api_v1_router.include_router(admin_schedule.router, prefix="/admin", tags=["Admin"])
api_v1_router.include_router(analytics.router, prefix="/admin", tags=["Admin"])
api_v1_router.include_router(admin_appointments.router, prefix="/admin", tags=["Admin"])
api_v1_router.include_router(admin_catalog.router, prefix="/admin", tags=["Admin"])
api_v1_router.include_router(customers.router, prefix="/admin", tags=["Admin"])


# ============================================================================
# ROOT ENDPOINT - API Info
# ============================================================================
@api_v1_router.get("/", tags=["Info"])
async def api_info():
    """Shows the structure of all API routes organized by authentication type."""
    return {
        "version": "1.0",
        "authentication": {
            "public": "No authentication required",
            "dashboard": "Identity-provider JWT bearer token required",
            "admin": "JWT bearer token + admin role required"
        }
    }
