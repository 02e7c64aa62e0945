"""
Dashboard statistics service.

Smaller views than the full analytics report: lot counts per state,
production vs sales for the last months, a sales forecast, supply activity
and low-stock alerts.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from panelera.core.settings import settings
from panelera.schemas.analytics import (
    ForecastPoint,
    InventoryStats,
    LowStockItem,
    LowStockResponse,
    MonthlySupplyActivity,
    ProductionVsSales,
    SalesForecastResponse,
    SupplyActivityResponse,
)
from panelera.services.analytics_report import gather_section
from panelera.services.analytics_store import AnalyticsStore
from panelera.services.cost_calculator import ZERO, sales_forecast
from panelera.services.stock_alerts import filter_low_stock
from panelera.services.time_buckets import generate_month_buckets

# The dashboard chart always shows the last six months
DASHBOARD_MONTHS = 6


async def get_inventory_stats(store: AnalyticsStore) -> InventoryStats:
    """Number of lots in each lifecycle state, zero for absent states."""
    (rows,) = await gather_section("inventory_stats", store.lots_by_state())
    counts = {row.state: row.lots for row in rows}
    return InventoryStats(
        in_production=counts.get("IN_PRODUCTION", 0),
        available=counts.get("AVAILABLE", 0),
        sold=counts.get("SOLD", 0),
        expired=counts.get("EXPIRED", 0),
    )


async def get_production_vs_sales(
    store: AnalyticsStore,
    now: Optional[datetime] = None,
    months: int = DASHBOARD_MONTHS,
    locale: Optional[str] = None,
) -> List[ProductionVsSales]:
    """Produced vs sold kg per month, oldest first."""
    buckets = generate_month_buckets(now or datetime.now(), months, locale or settings.REPORT_LOCALE)
    outcomes = await gather_section(
        "sales_stats",
        *(store.production_totals(b.start, b.end) for b in buckets),
        *(store.sales_totals(b.start, b.end) for b in buckets),
    )
    production, sales = outcomes[:months], outcomes[months:]
    return [
        ProductionVsSales(month=bucket.month_label, production=prod.quantity, sales=sale.quantity)
        for bucket, prod, sale in zip(buckets, production, sales)
    ]


async def get_sales_forecast(
    store: AnalyticsStore,
    periods: int = 3,
    now: Optional[datetime] = None,
    locale: Optional[str] = None,
) -> SalesForecastResponse:
    """Project monthly sold kg from the dashboard history."""
    locale = locale or settings.REPORT_LOCALE
    history = await get_production_vs_sales(store, now=now, locale=locale)
    forecast = sales_forecast([month.sales for month in history], periods=periods, locale=locale)
    return SalesForecastResponse(
        history=history,
        forecast=[ForecastPoint(period=p.label, projected=p.projected) for p in forecast],
    )


async def get_supply_activity(
    store: AnalyticsStore,
    months_back: int,
    now: Optional[datetime] = None,
    locale: Optional[str] = None,
) -> SupplyActivityResponse:
    """Monthly purchases and raw-material movements, oldest first."""
    buckets = generate_month_buckets(now or datetime.now(), months_back, locale or settings.REPORT_LOCALE)
    outcomes = await gather_section(
        "supply_activity",
        *(store.purchase_totals(b.start, b.end) for b in buckets),
        *(store.movement_totals(b.start, b.end) for b in buckets),
    )
    purchases, movements = outcomes[:months_back], outcomes[months_back:]
    return SupplyActivityResponse(
        months_back=months_back,
        months=[
            MonthlySupplyActivity(
                month=bucket.label,
                start=bucket.start,
                end=bucket.end,
                purchases=bought.purchases,
                purchased_quantity=bought.quantity,
                purchased_total=bought.total,
                movements=moved.movements,
                quantity_in=moved.quantity_in,
                quantity_out=moved.quantity_out,
            )
            for bucket, bought, moved in zip(buckets, purchases, movements)
        ],
    )


async def get_low_stock(store: AnalyticsStore) -> LowStockResponse:
    """Active supplies at or below their minimum stock."""
    (items,) = await gather_section("low_stock", store.active_supply_items())
    alerts = filter_low_stock(items)
    low_stock_items = [
        LowStockItem(
            supply_item_id=alert.item.id,
            name=alert.item.name,
            unit=alert.item.unit,
            current_stock=alert.item.current_stock,
            minimum_stock=alert.item.minimum_stock,
            shortage=alert.shortage,
            unit_cost=alert.item.unit_cost,
            restock_cost=alert.restock_cost,
        )
        for alert in alerts
    ]
    total: Decimal = sum((item.restock_cost for item in low_stock_items), ZERO)
    return LowStockResponse(
        total_items=len(low_stock_items),
        total_restock_cost=total,
        items=low_stock_items,
    )
