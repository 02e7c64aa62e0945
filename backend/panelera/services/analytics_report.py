"""
Analytics report assembly.

Builds the monthly production, sales and profitability series plus the
window-wide cost breakdown, lot-state comparison and rankings for a
look-back window. All reads are issued at once and joined back by bucket
index, so the series are chronological whatever order the reads finish in.

A read that fails is never turned into a zero: the report fails as a whole
with UpstreamReadError naming the affected sections.
"""
import asyncio
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from panelera.core.report_config import unknown_entity_label
from panelera.core.settings import settings
from panelera.core.status_config import LOT_STATE_ORDER
from panelera.exceptions import UpstreamReadError
from panelera.logging_config import get_logger
from panelera.schemas.analytics import (
    AnalyticsReport,
    CostCategoryShare,
    LotStateSummary,
    MonthlyProduction,
    MonthlyProfitability,
    MonthlySales,
    OperatorPerformance,
    SupplierRanking,
)
from panelera.services.analytics_queries import StateTotals
from panelera.services.analytics_store import AnalyticsStore
from panelera.services.cost_calculator import ZERO, calculate_profitability, decompose_costs
from panelera.services.rankings import rank_entities
from panelera.services.time_buckets import MonthBucket, generate_month_buckets

logger = get_logger(__name__)

REPORT_SECTIONS = (
    "production_monthly",
    "sales_monthly",
    "cost_breakdown",
    "lot_states",
    "profitability_monthly",
    "top_suppliers",
    "operator_performance",
)

_UNSET = object()


async def build_analytics_report(
    store: AnalyticsStore,
    months_back: int,
    *,
    now: Optional[datetime] = None,
    locale: Optional[str] = None,
    supplier_limit=_UNSET,
    operator_limit=_UNSET,
    timeout: Optional[float] = None,
) -> AnalyticsReport:
    """
    Assemble the analytics report for the last ``months_back`` months.

    ``months_back`` must already be resolved (clamped or validated). The
    window for the cost breakdown and rankings starts at the first bucket;
    the lot-state comparison covers all time. ``now`` anchors the buckets,
    so two calls with the same ``now`` over unchanged data return identical
    reports.

    Raises:
        UpstreamReadError: a read failed or the report exceeded ``timeout``
    """
    now = now or datetime.now()
    locale = locale or settings.REPORT_LOCALE
    if supplier_limit is _UNSET:
        supplier_limit = settings.SUPPLIER_RANKING_LIMIT
    if operator_limit is _UNSET:
        operator_limit = settings.OPERATOR_RANKING_LIMIT
    timeout = timeout or settings.ANALYTICS_TIMEOUT_SECONDS

    buckets = generate_month_buckets(now, months_back, locale)
    since = buckets[0].start

    try:
        report = await asyncio.wait_for(
            _assemble(store, buckets, since, locale, supplier_limit, operator_limit),
            timeout=timeout,
        )
    except asyncio.TimeoutError:
        logger.error(
            "Analytics report timed out",
            extra={"months_back": months_back, "timeout_seconds": timeout},
        )
        raise UpstreamReadError(list(REPORT_SECTIONS), reason=f"timed out after {timeout}s")

    logger.info(
        "Analytics report built",
        extra={"months_back": months_back, "period_start": since.isoformat()},
    )
    return report


async def _ranked_suppliers(store: AnalyticsStore, since: datetime, limit, locale: str):
    groups = await store.purchases_by_supplier(since)
    return await rank_entities(
        groups, store.supplier_name, limit=limit, unknown_label=unknown_entity_label(locale)
    )


async def _ranked_operators(store: AnalyticsStore, since: datetime, limit, locale: str):
    groups = await store.lots_by_operator(since)
    return await rank_entities(
        groups, store.operator_name, limit=limit, unknown_label=unknown_entity_label(locale)
    )


async def _assemble(
    store: AnalyticsStore,
    buckets: List[MonthBucket],
    since: datetime,
    locale: str,
    supplier_limit: Optional[int],
    operator_limit: Optional[int],
) -> AnalyticsReport:
    n = len(buckets)
    window_reads = {
        "cost_breakdown": store.lot_cost_components(since),
        "lot_states": store.lots_by_state(),
        "top_suppliers": _ranked_suppliers(store, since, supplier_limit, locale),
        "operator_performance": _ranked_operators(store, since, operator_limit, locale),
    }

    outcomes = await asyncio.gather(
        *(store.production_totals(b.start, b.end) for b in buckets),
        *(store.sales_totals(b.start, b.end) for b in buckets),
        *window_reads.values(),
        return_exceptions=True,
    )

    production = outcomes[:n]
    sales = outcomes[n:2 * n]
    window = dict(zip(window_reads.keys(), outcomes[2 * n:]))

    failures: Dict[str, BaseException] = {}
    for section, series in (("production_monthly", production), ("sales_monthly", sales)):
        error = _first_error(series)
        if error is not None:
            failures[section] = error
    if failures:
        # profitability is derived from the production costs and sales revenue
        failures["profitability_monthly"] = next(iter(failures.values()))
    for section, outcome in window.items():
        if isinstance(outcome, BaseException):
            failures[section] = outcome

    if failures:
        _raise_read_failure(failures)

    return AnalyticsReport(
        months_back=n,
        period_start=buckets[0].start,
        period_end=buckets[-1].end,
        production_monthly=[
            MonthlyProduction(
                month=bucket.label,
                start=bucket.start,
                end=bucket.end,
                quantity=totals.quantity,
                lots=totals.lots,
                cost=totals.cost,
            )
            for bucket, totals in zip(buckets, production)
        ],
        sales_monthly=[
            MonthlySales(
                month=bucket.label,
                start=bucket.start,
                end=bucket.end,
                quantity=totals.quantity,
                revenue=totals.revenue,
                sales=totals.sales,
            )
            for bucket, totals in zip(buckets, sales)
        ],
        cost_breakdown=[
            CostCategoryShare(
                category=share.category,
                label=share.label,
                total=share.total,
                percentage=share.percentage,
            )
            for share in decompose_costs(window["cost_breakdown"], locale)
        ],
        lot_states=summarize_lot_states(window["lot_states"]),
        profitability_monthly=[
            _monthly_profitability(bucket, prod.cost, sale.revenue)
            for bucket, prod, sale in zip(buckets, production, sales)
        ],
        top_suppliers=[
            SupplierRanking(
                supplier_id=r.entity_id, name=r.name, purchases=r.count, total=r.total
            )
            for r in window["top_suppliers"]
        ],
        operator_performance=[
            OperatorPerformance(
                operator_id=r.entity_id, name=r.name, lots=r.count, quantity=r.total
            )
            for r in window["operator_performance"]
        ],
    )


def _monthly_profitability(bucket: MonthBucket, costs, revenue) -> MonthlyProfitability:
    result = calculate_profitability(costs, revenue)
    return MonthlyProfitability(
        month=bucket.label,
        start=bucket.start,
        end=bucket.end,
        revenue=result.revenue,
        costs=result.costs,
        profit=result.profit,
        margin=result.margin,
    )


def summarize_lot_states(rows: Sequence[StateTotals]) -> List[LotStateSummary]:
    """One entry per lifecycle state in fixed order, zero-filled."""
    by_state = {row.state: row for row in rows}
    unknown = set(by_state) - {s.value for s in LOT_STATE_ORDER}
    if unknown:
        logger.warning("Ignoring lots in unknown states", extra={"states": sorted(unknown)})

    summaries = []
    for state in LOT_STATE_ORDER:
        row = by_state.get(state.value)
        summaries.append(LotStateSummary(
            state=state,
            lots=row.lots if row else 0,
            quantity=row.quantity if row else ZERO,
            value=row.value if row else ZERO,
        ))
    return summaries


async def gather_section(section: str, *reads) -> list:
    """
    Await reads that feed a single section, in order.

    Fails with UpstreamReadError for ``section`` if any read fails.
    """
    outcomes = await asyncio.gather(*reads, return_exceptions=True)
    error = _first_error(outcomes)
    if error is not None:
        _raise_read_failure({section: error}, sections=[section])
    return list(outcomes)


def _first_error(outcomes: Sequence) -> Optional[BaseException]:
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            return outcome
    return None


def _raise_read_failure(
    failures: Dict[str, BaseException], sections: Optional[List[str]] = None
) -> None:
    sections = sections or [s for s in REPORT_SECTIONS if s in failures]
    first = failures[sections[0]]
    logger.error(
        "Analytics read failed",
        extra={"sections": sections, "reason": repr(first)},
        exc_info=(type(first), first, first.__traceback__),
    )
    raise UpstreamReadError(sections, reason=str(first) or type(first).__name__) from first
