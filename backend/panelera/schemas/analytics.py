"""
Schemas for the analytics report and dashboard statistics.
"""
from datetime import datetime
from decimal import Decimal
from typing import List

from pydantic import BaseModel, Field

from panelera.core.report_config import CostCategory
from panelera.core.status_config import LotState


# ============================================================================
# Analytics report sections
# ============================================================================

class MonthlyProduction(BaseModel):
    """Production totals for one calendar month"""
    month: str = Field(description="Abbreviated month and 2-digit year, e.g. 'oct 26'")
    start: datetime
    end: datetime
    quantity: Decimal = Field(description="Produced kg")
    lots: int
    cost: Decimal


class MonthlySales(BaseModel):
    month: str
    start: datetime
    end: datetime
    quantity: Decimal
    revenue: Decimal
    sales: int


class CostCategoryShare(BaseModel):
    """One cost category's share of total production cost over the window"""
    category: CostCategory
    label: str
    total: Decimal
    percentage: float


class LotStateSummary(BaseModel):
    state: LotState
    lots: int
    quantity: Decimal
    value: Decimal = Field(description="Summed total cost of the lots")


class MonthlyProfitability(BaseModel):
    month: str
    start: datetime
    end: datetime
    revenue: Decimal
    costs: Decimal
    profit: Decimal
    margin: float = Field(description="Profit over cost in percent; 0 when there were no costs")


class SupplierRanking(BaseModel):
    supplier_id: int
    name: str
    purchases: int
    total: Decimal


class OperatorPerformance(BaseModel):
    operator_id: int
    name: str
    lots: int
    quantity: Decimal


class AnalyticsReport(BaseModel):
    """Full analytics payload for a look-back window"""
    months_back: int
    period_start: datetime
    period_end: datetime
    production_monthly: List[MonthlyProduction]
    sales_monthly: List[MonthlySales]
    cost_breakdown: List[CostCategoryShare]
    lot_states: List[LotStateSummary]
    profitability_monthly: List[MonthlyProfitability]
    top_suppliers: List[SupplierRanking]
    operator_performance: List[OperatorPerformance]


class BreakEvenResponse(BaseModel):
    units: int
    revenue: Decimal
    contribution_margin: Decimal


# ============================================================================
# Dashboard
# ============================================================================

class InventoryStats(BaseModel):
    """Lot counts per lifecycle state"""
    in_production: int = 0
    available: int = 0
    sold: int = 0
    expired: int = 0


class ProductionVsSales(BaseModel):
    month: str = Field(description="Abbreviated month, e.g. 'oct'")
    production: Decimal
    sales: Decimal


class ForecastPoint(BaseModel):
    period: str
    projected: int


class SalesForecastResponse(BaseModel):
    history: List[ProductionVsSales]
    forecast: List[ForecastPoint]


class MonthlySupplyActivity(BaseModel):
    month: str
    start: datetime
    end: datetime
    purchases: int
    purchased_quantity: Decimal
    purchased_total: Decimal
    movements: int
    quantity_in: Decimal
    quantity_out: Decimal


class SupplyActivityResponse(BaseModel):
    months_back: int
    months: List[MonthlySupplyActivity]


# ============================================================================
# Stock alerts
# ============================================================================

class LowStockItem(BaseModel):
    supply_item_id: int
    name: str
    unit: str
    current_stock: Decimal
    minimum_stock: Decimal
    shortage: Decimal
    unit_cost: Decimal
    restock_cost: Decimal


class LowStockResponse(BaseModel):
    total_items: int
    total_restock_cost: Decimal
    items: List[LowStockItem]
