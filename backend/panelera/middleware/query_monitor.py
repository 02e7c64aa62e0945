"""
Query Performance Monitoring Middleware

Times every SQL statement and logs slow queries. Per-request totals are
collected through a context variable, which is copied into the threadpool
workers that run the analytics reads, so a report's fan-out is counted
against the request that triggered it.
"""
import threading
import time
import logging
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from sqlalchemy import event
from sqlalchemy.engine import Engine

from panelera.core.settings import settings
from panelera.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class QueryStats:
    count: int = 0
    total_time: float = 0.0
    slow_queries: List[Tuple[str, float]] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def record(self, statement: str, duration: float) -> None:
        with self._lock:
            self.count += 1
            self.total_time += duration
            if duration > settings.WARN_QUERY_THRESHOLD:
                self.slow_queries.append((statement, duration))


_current_stats: ContextVar[Optional[QueryStats]] = ContextVar("query_stats", default=None)


class QueryPerformanceMonitor(BaseHTTPMiddleware):
    """
    Middleware to monitor query performance during HTTP requests.

    Tracks:
    - Total query count per request
    - Total query time per request
    - Individual slow queries
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        stats = QueryStats()
        token = _current_stats.set(stats)

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            _current_stats.reset(token)
        total_time = time.perf_counter() - start_time

        if stats.total_time > settings.WARN_QUERY_THRESHOLD or stats.slow_queries:
            log_level = (
                logging.ERROR if stats.total_time > settings.SLOW_QUERY_THRESHOLD else logging.WARNING
            )
            logger.log(
                log_level,
                f"Request performance: {request.method} {request.url.path} | "
                f"Total: {total_time:.3f}s | Queries: {stats.count} ({stats.total_time:.3f}s) | "
                f"Slow queries: {len(stats.slow_queries)}"
            )

        # Add performance headers for debugging
        response.headers["X-Query-Count"] = str(stats.count)
        response.headers["X-Query-Time"] = f"{stats.total_time:.3f}"
        response.headers["X-Total-Time"] = f"{total_time:.3f}"

        return response


def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    """Record query start time"""
    conn.info.setdefault("query_start_time", []).append(time.perf_counter())


def _after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    """Record query end time, log slow queries and feed the request totals."""
    total = time.perf_counter() - conn.info["query_start_time"].pop(-1)

    if total > settings.SLOW_QUERY_THRESHOLD:
        logger.error(
            f"SLOW QUERY ({total:.3f}s): {statement[:500]}{'...' if len(statement) > 500 else ''}"
        )
    elif total > settings.WARN_QUERY_THRESHOLD:
        logger.warning(
            f"Slow query ({total:.3f}s): {statement[:200]}{'...' if len(statement) > 200 else ''}"
        )

    stats = _current_stats.get()
    if stats is not None:
        stats.record(statement, total)


def setup_query_logging(engine: Engine):
    """
    Set up SQLAlchemy event listeners for query performance tracking.

    Safe to call on every startup; listeners are only attached once per engine.
    """
    if not event.contains(engine, "before_cursor_execute", _before_cursor_execute):
        event.listen(engine, "before_cursor_execute", _before_cursor_execute)
        event.listen(engine, "after_cursor_execute", _after_cursor_execute)
