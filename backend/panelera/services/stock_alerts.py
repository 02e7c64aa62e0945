"""
Low-stock detection for raw-material supplies.

An item is low on stock when its current stock is at or below its
configured minimum. This is a read-time classification; nothing is
written and no notification is sent.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List

from panelera.services.analytics_queries import SupplyStock
from panelera.services.cost_calculator import to_decimal


@dataclass(frozen=True)
class StockAlert:
    item: SupplyStock
    shortage: Decimal  # minimum - current, 0 when exactly at the minimum

    @property
    def restock_cost(self) -> Decimal:
        """Cost of bringing the item back up to its minimum."""
        return self.shortage * self.item.unit_cost


def is_low_stock(current_stock, minimum_stock) -> bool:
    return to_decimal(current_stock) <= to_decimal(minimum_stock)


def filter_low_stock(items: Iterable[SupplyStock]) -> List[StockAlert]:
    """Keep the items at or below their minimum, preserving input order."""
    return [
        StockAlert(item=item, shortage=item.minimum_stock - item.current_stock)
        for item in items
        if is_low_stock(item.current_stock, item.minimum_stock)
    ]
