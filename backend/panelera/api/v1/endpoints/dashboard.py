"""
Dashboard Endpoints

Summary statistics for the home dashboard.
"""
from fastapi import APIRouter, Depends, Query

from panelera.api.v1.deps import get_analytics_store, get_current_staff_user
from panelera.core.settings import settings
from panelera.models.user import User
from panelera.schemas.analytics import (
    InventoryStats,
    ProductionVsSales,
    SalesForecastResponse,
    SupplyActivityResponse,
)
from panelera.services import dashboard
from panelera.services.analytics_store import AnalyticsStore
from panelera.services.time_buckets import resolve_months_back

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/inventory-stats", response_model=InventoryStats)
async def get_inventory_stats(
    current_user: User = Depends(get_current_staff_user),
    store: AnalyticsStore = Depends(get_analytics_store),
):
    """Lot counts per lifecycle state"""
    return await dashboard.get_inventory_stats(store)


@router.get("/sales-stats", response_model=list[ProductionVsSales])
async def get_sales_stats(
    current_user: User = Depends(get_current_staff_user),
    store: AnalyticsStore = Depends(get_analytics_store),
):
    """Produced vs sold kg for the last six months"""
    return await dashboard.get_production_vs_sales(store)


@router.get("/sales-forecast", response_model=SalesForecastResponse)
async def get_sales_forecast(
    periods: int = Query(default=3, ge=1, le=12, description="Months to project"),
    current_user: User = Depends(get_current_staff_user),
    store: AnalyticsStore = Depends(get_analytics_store),
):
    """Sales projection from the last six months (moving average plus trend)"""
    return await dashboard.get_sales_forecast(store, periods=periods)


@router.get("/supply-activity", response_model=SupplyActivityResponse)
async def get_supply_activity(
    months_back: int = Query(default=settings.DEFAULT_MONTHS_BACK),
    current_user: User = Depends(get_current_staff_user),
    store: AnalyticsStore = Depends(get_analytics_store),
):
    """Monthly purchases and raw-material movements"""
    return await dashboard.get_supply_activity(store, resolve_months_back(months_back))
