"""
Async access to the analytics queries.

Every read runs in the threadpool with its own Session, so the report
assembler can fan out many reads at once from the event loop. A semaphore
caps how many reads are in flight (and therefore how many pooled
connections a single report can hold).
"""
import asyncio
from datetime import datetime
from typing import Callable, List, Optional, TypeVar

from sqlalchemy.orm import Session, sessionmaker
from starlette.concurrency import run_in_threadpool

from panelera.core.settings import settings
from panelera.services import analytics_queries as queries
from panelera.services.analytics_queries import (
    GroupTotal,
    MovementTotals,
    ProductionTotals,
    PurchaseTotals,
    SalesTotals,
    StateTotals,
    SupplyStock,
)
from panelera.services.cost_calculator import CostComponents

T = TypeVar("T")


class AnalyticsStore:
    """Awaitable wrappers over panelera.services.analytics_queries."""

    def __init__(self, session_factory: sessionmaker, max_concurrent_reads: Optional[int] = None):
        self._session_factory = session_factory
        self._semaphore = asyncio.Semaphore(
            max_concurrent_reads or settings.ANALYTICS_MAX_CONCURRENT_READS
        )

    def _run(self, query: Callable[..., T], *args) -> T:
        db: Session = self._session_factory()
        try:
            return query(db, *args)
        finally:
            db.close()

    async def _read(self, query: Callable[..., T], *args) -> T:
        """
        Run ``query`` on a worker thread.

        The semaphore slot is released when the worker finishes, not when the
        caller stops waiting, so a cancelled or timed-out read keeps counting
        against the limit while its session is still open.
        """
        await self._semaphore.acquire()
        try:
            worker = asyncio.ensure_future(run_in_threadpool(self._run, query, *args))
        except BaseException:
            self._semaphore.release()
            raise
        worker.add_done_callback(self._release_slot)
        return await asyncio.shield(worker)

    def _release_slot(self, worker: "asyncio.Future") -> None:
        self._semaphore.release()
        if not worker.cancelled():
            # mark the outcome as retrieved when nobody awaits it any more
            worker.exception()

    # Aggregate totals

    async def production_totals(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> ProductionTotals:
        return await self._read(queries.production_totals, start, end)

    async def sales_totals(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> SalesTotals:
        return await self._read(queries.sales_totals, start, end)

    async def purchase_totals(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> PurchaseTotals:
        return await self._read(queries.purchase_totals, start, end)

    async def movement_totals(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> MovementTotals:
        return await self._read(queries.movement_totals, start, end)

    # Group-by totals

    async def purchases_by_supplier(self, since: Optional[datetime] = None) -> List[GroupTotal]:
        return await self._read(queries.purchases_by_supplier, since)

    async def lots_by_operator(self, since: Optional[datetime] = None) -> List[GroupTotal]:
        return await self._read(queries.lots_by_operator, since)

    async def lots_by_state(self) -> List[StateTotals]:
        return await self._read(queries.lots_by_state)

    # Bulk reads

    async def lot_cost_components(self, since: Optional[datetime] = None) -> List[CostComponents]:
        return await self._read(queries.lot_cost_components, since)

    async def active_supply_items(self) -> List[SupplyStock]:
        return await self._read(queries.active_supply_items)

    # Lookups

    async def supplier_name(self, supplier_id: int) -> Optional[str]:
        return await self._read(queries.supplier_name, supplier_id)

    async def operator_name(self, user_id: int) -> Optional[str]:
        return await self._read(queries.operator_name, user_id)
