"""
Supply Endpoints

Raw-material stock alerts.
"""
from fastapi import APIRouter, Depends

from panelera.api.v1.deps import get_analytics_store, get_current_staff_user
from panelera.logging_config import get_logger
from panelera.models.user import User
from panelera.schemas.analytics import LowStockResponse
from panelera.services import dashboard
from panelera.services.analytics_store import AnalyticsStore

router = APIRouter(prefix="/supplies", tags=["supplies"])
logger = get_logger(__name__)


@router.get("/low-stock", response_model=LowStockResponse)
async def get_low_stock_supplies(
    current_user: User = Depends(get_current_staff_user),
    store: AnalyticsStore = Depends(get_analytics_store),
):
    """
    Get active supplies at or below their minimum stock

    Each item carries its shortage (minimum minus current) and the cost of
    restocking it up to the minimum.
    """
    response = await dashboard.get_low_stock(store)
    if response.total_items:
        logger.info("Low-stock supplies found", extra={"count": response.total_items})
    return response
