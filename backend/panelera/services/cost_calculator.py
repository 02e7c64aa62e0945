"""
Cost and profitability calculations for panela production.

Pure functions over Decimal amounts:
1. Lot costing (total, unit cost, suggested price)
2. Cost decomposition across the five fixed cost categories
3. Profit and margin per period
4. Sales forecast and break-even analysis

Every percentage returned here is finite: a zero denominator yields 0.
"""
import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Sequence, Union

from panelera.core.report_config import (
    COST_CATEGORIES,
    CostCategory,
    cost_category_label,
    forecast_period_label,
)

Number = Union[Decimal, int, float]

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value) -> Decimal:
    """Coerce a numeric value (or None) to Decimal without float artifacts."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def safe_percentage(part: Number, whole: Number) -> float:
    """part / whole * 100, or 0.0 when whole is zero."""
    whole = to_decimal(whole)
    if whole == 0:
        return 0.0
    return float(to_decimal(part) / whole * HUNDRED)


# ============================================================================
# Lot costing
# ============================================================================

@dataclass(frozen=True)
class CostComponents:
    """Cost sub-totals of one lot, or of many lots summed together"""
    cane: Decimal = ZERO
    labor: Decimal = ZERO
    energy: Decimal = ZERO
    packaging: Decimal = ZERO
    transport: Decimal = ZERO

    def amount(self, category: CostCategory) -> Decimal:
        return getattr(self, category.value)

    @property
    def total(self) -> Decimal:
        return sum((self.amount(c) for c in COST_CATEGORIES), ZERO)

    def __add__(self, other: "CostComponents") -> "CostComponents":
        return CostComponents(
            cane=self.cane + other.cane,
            labor=self.labor + other.labor,
            energy=self.energy + other.energy,
            packaging=self.packaging + other.packaging,
            transport=self.transport + other.transport,
        )


def lot_total_cost(components: CostComponents) -> Decimal:
    return components.total


def unit_cost(total_cost: Number, quantity: Number) -> Decimal:
    """Cost per kg; 0 when the lot has no quantity."""
    quantity = to_decimal(quantity)
    if quantity <= 0:
        return ZERO
    return to_decimal(total_cost) / quantity


def suggested_price(total_cost: Number, margin_percent: Number) -> Decimal:
    """Price that yields ``margin_percent`` over cost."""
    return to_decimal(total_cost) * (1 + to_decimal(margin_percent) / HUNDRED)


def price_per_kilo(price: Number, quantity: Number) -> Decimal:
    quantity = to_decimal(quantity)
    if quantity <= 0:
        return ZERO
    return to_decimal(price) / quantity


def return_on_cost(price: Number, cost: Number) -> float:
    """(price - cost) / cost * 100, 0 when cost is zero."""
    cost = to_decimal(cost)
    if cost <= 0:
        return 0.0
    return safe_percentage(to_decimal(price) - cost, cost)


# ============================================================================
# Cost decomposition
# ============================================================================

@dataclass(frozen=True)
class CostShare:
    """One category's share of total cost over a window"""
    category: CostCategory
    label: str
    total: Decimal
    percentage: float


def sum_cost_components(records: Iterable[CostComponents]) -> CostComponents:
    totals = CostComponents()
    for record in records:
        totals = totals + record
    return totals


def decompose_costs(records: Iterable[CostComponents], locale: str = "es") -> List[CostShare]:
    """
    Per-category totals and their share of the grand total.

    Categories with a zero total are left out. The result is sorted by total,
    largest first; equal totals keep the fixed category order. With no cost
    at all the result is empty.
    """
    totals = sum_cost_components(records)
    grand_total = totals.total
    if grand_total == 0:
        return []

    shares = [
        CostShare(
            category=category,
            label=cost_category_label(category, locale),
            total=totals.amount(category),
            percentage=safe_percentage(totals.amount(category), grand_total),
        )
        for category in COST_CATEGORIES
        if totals.amount(category) > 0
    ]
    shares.sort(key=lambda s: s.total, reverse=True)
    return shares


# ============================================================================
# Profitability
# ============================================================================

@dataclass(frozen=True)
class Profitability:
    costs: Decimal
    revenue: Decimal
    profit: Decimal
    margin: float


def calculate_profitability(costs: Number, revenue: Number) -> Profitability:
    """
    Profit and margin over cost for one period.

    margin = profit / costs * 100, and 0 when there were no costs, whatever
    the revenue.
    """
    costs = to_decimal(costs)
    revenue = to_decimal(revenue)
    profit = revenue - costs
    margin = safe_percentage(profit, costs) if costs > 0 else 0.0
    return Profitability(costs=costs, revenue=revenue, profit=profit, margin=margin)


# ============================================================================
# Forecast and break-even
# ============================================================================

@dataclass(frozen=True)
class ForecastPoint:
    label: str
    projected: int


def sales_forecast(
    history: Sequence[Number],
    periods: int = 3,
    locale: str = "es",
) -> List[ForecastPoint]:
    """
    Project the next ``periods`` values of a monthly series.

    Uses the average of the last three values plus a linear trend of
    (last - first) / len(history) per period. Needs at least three points;
    projections never go below zero.
    """
    if len(history) < 3 or periods < 1:
        return []

    values = [to_decimal(v) for v in history]
    recent = values[-3:]
    average = sum(recent, ZERO) / len(recent)
    trend = (values[-1] - values[0]) / len(values)

    forecast = []
    for i in range(1, periods + 1):
        projected = max(ZERO, average + trend * i)
        forecast.append(ForecastPoint(
            label=forecast_period_label(len(values) + i, locale),
            projected=int(projected.quantize(Decimal("1"), rounding=ROUND_HALF_UP)),
        ))
    return forecast


@dataclass(frozen=True)
class BreakEven:
    units: int
    revenue: Decimal


def break_even(
    fixed_costs: Number,
    variable_cost_per_unit: Number,
    selling_price_per_unit: Number,
) -> BreakEven:
    """Units (rounded up) and revenue needed to cover fixed costs."""
    price = to_decimal(selling_price_per_unit)
    contribution_margin = price - to_decimal(variable_cost_per_unit)
    if contribution_margin <= 0:
        return BreakEven(units=0, revenue=ZERO)

    units = math.ceil(to_decimal(fixed_costs) / contribution_margin)
    return BreakEven(units=units, revenue=units * price)
