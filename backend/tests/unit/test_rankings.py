"""
Unit tests for supplier / operator ranking.
"""
import asyncio
from decimal import Decimal

import pytest

from panelera.services.analytics_queries import GroupTotal
from panelera.services.rankings import rank_entities, rank_groups


def _groups(*totals):
    return [
        GroupTotal(entity_id=i + 1, count=i + 1, total=Decimal(str(t)))
        for i, t in enumerate(totals)
    ]


class TestRankGroups:

    def test_fifteen_suppliers_keeps_top_ten(self):
        """Only the ten largest totals survive, sorted descending."""
        groups = _groups(*range(100, 1600, 100))
        names = [f"Proveedor {g.entity_id}" for g in groups]

        ranked = rank_groups(groups, names, limit=10)

        assert len(ranked) == 10
        assert [r.total for r in ranked] == [Decimal(t) for t in range(1500, 500, -100)]
        assert ranked[0].name == "Proveedor 15"
        assert ranked[0].count == 15

    def test_no_limit_keeps_everything(self):
        groups = _groups(5, 30, 10)

        ranked = rank_groups(groups, ["a", "b", "c"])

        assert [r.name for r in ranked] == ["b", "c", "a"]

    def test_ties_keep_input_order(self):
        groups = _groups(50, 70, 50, 50)

        ranked = rank_groups(groups, ["first", "top", "second", "third"])

        assert [r.name for r in ranked] == ["top", "first", "second", "third"]

    def test_missing_name_uses_unknown_label(self):
        groups = _groups(10, 20)

        ranked = rank_groups(groups, [None, "Conocido"], unknown_label="Unknown")

        assert [r.name for r in ranked] == ["Conocido", "Unknown"]

    def test_fewer_groups_than_limit(self):
        assert len(rank_groups(_groups(1, 2), ["a", "b"], limit=10)) == 2

    def test_empty(self):
        assert rank_groups([], [], limit=10) == []

    def test_misaligned_names(self):
        with pytest.raises(ValueError):
            rank_groups(_groups(1, 2), ["a"])


class TestRankEntities:

    def test_resolves_names_concurrently(self):
        """Names come back aligned even when lookups finish out of order."""
        groups = _groups(10, 30, 20)
        names = {1: "Uno", 2: "Dos", 3: None}

        async def lookup(entity_id):
            # the first lookups take longest
            await asyncio.sleep(0.01 * (4 - entity_id))
            return names[entity_id]

        ranked = asyncio.run(rank_entities(groups, lookup, limit=2))

        assert [(r.entity_id, r.name) for r in ranked] == [(2, "Dos"), (3, "Desconocido")]
