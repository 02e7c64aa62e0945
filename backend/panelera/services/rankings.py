"""
Top-N rankings of owning entities (suppliers by purchases, operators by
production).
"""
import asyncio
from dataclasses import dataclass
from decimal import Decimal
from typing import Awaitable, Callable, List, Optional, Sequence

from panelera.services.analytics_queries import GroupTotal


@dataclass(frozen=True)
class RankedEntity:
    entity_id: int
    name: str
    count: int
    total: Decimal


def rank_groups(
    groups: Sequence[GroupTotal],
    names: Sequence[Optional[str]],
    limit: Optional[int] = None,
    unknown_label: str = "Desconocido",
) -> List[RankedEntity]:
    """
    Join names onto group totals, sort by total (largest first) and keep the
    top ``limit`` (all when None).

    ``names`` is aligned with ``groups``; a missing name becomes
    ``unknown_label``. The sort is stable, so equal totals keep input order.
    """
    if len(groups) != len(names):
        raise ValueError("names must be aligned with groups")

    ranked = [
        RankedEntity(
            entity_id=group.entity_id,
            name=name or unknown_label,
            count=group.count,
            total=group.total,
        )
        for group, name in zip(groups, names)
    ]
    ranked.sort(key=lambda r: r.total, reverse=True)
    if limit is not None:
        ranked = ranked[:limit]
    return ranked


async def rank_entities(
    groups: Sequence[GroupTotal],
    lookup_name: Callable[[int], Awaitable[Optional[str]]],
    limit: Optional[int] = None,
    unknown_label: str = "Desconocido",
) -> List[RankedEntity]:
    """Resolve every group's name concurrently, then rank."""
    names = await asyncio.gather(*(lookup_name(g.entity_id) for g in groups))
    return rank_groups(groups, names, limit=limit, unknown_label=unknown_label)
