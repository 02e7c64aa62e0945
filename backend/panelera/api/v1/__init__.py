"""
API v1 Router - Panelera
"""
from fastapi import APIRouter
from panelera.api.v1.endpoints import (
    analytics,
    dashboard,
    supplies,
)

router = APIRouter()

# Analytics report
router.include_router(analytics.router)

# Dashboard statistics
router.include_router(dashboard.router)

# Raw-material stock alerts
router.include_router(supplies.router)
