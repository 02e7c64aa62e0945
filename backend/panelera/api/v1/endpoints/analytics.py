"""
Analytics endpoints

Monthly production, sales and profitability series, cost breakdown,
lot-state comparison and rankings for a look-back window.
"""
from decimal import Decimal

from fastapi import APIRouter, Depends, Query

from panelera.api.v1.deps import get_analytics_store, get_analytics_user
from panelera.core.settings import settings
from panelera.models.user import User
from panelera.schemas.analytics import AnalyticsReport, BreakEvenResponse
from panelera.services.analytics_report import build_analytics_report
from panelera.services.analytics_store import AnalyticsStore
from panelera.services.cost_calculator import break_even
from panelera.services.time_buckets import resolve_months_back

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("", response_model=AnalyticsReport)
async def get_analytics_report(
    months_back: int = Query(
        default=settings.DEFAULT_MONTHS_BACK,
        description="Months to look back; clamped to 3-12",
    ),
    current_user: User = Depends(get_analytics_user),
    store: AnalyticsStore = Depends(get_analytics_store),
):
    """
    Get the analytics report

    Returns seven sections: production_monthly, sales_monthly,
    cost_breakdown, lot_states, profitability_monthly, top_suppliers and
    operator_performance. Monthly series hold one entry per month, oldest
    first.
    """
    effective = resolve_months_back(months_back)
    return await build_analytics_report(store, effective)


@router.get("/break-even", response_model=BreakEvenResponse)
async def get_break_even(
    fixed_costs: Decimal = Query(..., ge=0),
    variable_cost_per_unit: Decimal = Query(..., ge=0),
    selling_price_per_unit: Decimal = Query(..., ge=0),
    current_user: User = Depends(get_analytics_user),
):
    """
    Break-even units and revenue

    Units are rounded up. When the price does not exceed the variable cost
    there is no break-even point and both values are 0.
    """
    result = break_even(fixed_costs, variable_cost_per_unit, selling_price_per_unit)
    return BreakEvenResponse(
        units=result.units,
        revenue=result.revenue,
        contribution_margin=selling_price_per_unit - variable_cost_per_unit,
    )
