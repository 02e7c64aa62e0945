"""
Calendar-month buckets for time-series reports.

A report over N months uses N contiguous buckets ending with the month that
contains ``now``. Each bucket covers one calendar month with an inclusive
[start, end] pair, where end is the last microsecond of the month.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional

from dateutil.relativedelta import relativedelta

from panelera.core.report_config import month_abbreviation
from panelera.core.settings import settings
from panelera.exceptions import InvalidParameterError


@dataclass(frozen=True)
class MonthBucket:
    """One calendar month of a report window"""
    index: int
    start: datetime
    end: datetime
    label: str        # "oct 26"
    month_label: str  # "oct"


def clamp_months_back(
    months_back: int,
    minimum: Optional[int] = None,
    maximum: Optional[int] = None,
) -> int:
    """Clamp a requested look-back into the supported window (3..12 by default)."""
    minimum = settings.MIN_MONTHS_BACK if minimum is None else minimum
    maximum = settings.MAX_MONTHS_BACK if maximum is None else maximum
    return min(max(months_back, minimum), maximum)


def resolve_months_back(months_back: Optional[int], strict: Optional[bool] = None) -> int:
    """
    Apply the configured policy to a requested look-back.

    By default out-of-range values are clamped. With strict mode they are
    rejected with InvalidParameterError instead.
    """
    if months_back is None:
        months_back = settings.DEFAULT_MONTHS_BACK
    strict = settings.ANALYTICS_STRICT_MONTHS_BACK if strict is None else strict

    effective = clamp_months_back(months_back)
    if strict and effective != months_back:
        raise InvalidParameterError(
            f"months_back must be between {settings.MIN_MONTHS_BACK} and {settings.MAX_MONTHS_BACK}",
            parameter="months_back",
            value=months_back,
            allowed=f"{settings.MIN_MONTHS_BACK}-{settings.MAX_MONTHS_BACK}",
        )
    return effective


def month_start(moment: datetime) -> datetime:
    return moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def month_end(moment: datetime) -> datetime:
    return month_start(moment) + relativedelta(months=1) - timedelta(microseconds=1)


def generate_month_buckets(now: datetime, months_back: int, locale: str = "es") -> List[MonthBucket]:
    """
    Build ``months_back`` buckets ordered oldest to newest.

    The caller is expected to have clamped ``months_back`` already; this
    function only requires it to be positive.
    """
    if months_back < 1:
        raise ValueError("months_back must be positive")

    current = month_start(now)
    buckets = []
    for index in range(months_back):
        start = current - relativedelta(months=months_back - 1 - index)
        abbreviation = month_abbreviation(start.month, locale)
        buckets.append(MonthBucket(
            index=index,
            start=start,
            end=month_end(start),
            label=f"{abbreviation} {start.year % 100:02d}",
            month_label=abbreviation,
        ))
    return buckets
