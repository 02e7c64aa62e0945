"""
Read-only queries behind the analytics reports.

Each function takes a Session and returns plain dataclasses, so callers
never touch ORM rows. Time filters are inclusive on both ends and either
end may be omitted (bucket, "since" window, or all time). Sums over no rows
come back as zero, never None.

Functions are grouped by kind:
- aggregate totals per fact table (production, sales, purchases, movements)
- group-by-owner totals (suppliers, operators, lot states)
- bulk reads (lot cost components, active supply items)
- single-record lookups (supplier and operator names)
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from panelera.core.status_config import MovementDirection
from panelera.models.production_lot import ProductionLot, Sale
from panelera.models.supplier import Purchase, Supplier
from panelera.models.supply import SupplyItem, SupplyMovement
from panelera.models.user import User
from panelera.services.cost_calculator import CostComponents, to_decimal


@dataclass(frozen=True)
class ProductionTotals:
    quantity: Decimal
    cost: Decimal
    lots: int


@dataclass(frozen=True)
class SalesTotals:
    quantity: Decimal
    revenue: Decimal
    sales: int


@dataclass(frozen=True)
class PurchaseTotals:
    quantity: Decimal
    total: Decimal
    purchases: int


@dataclass(frozen=True)
class MovementTotals:
    quantity_in: Decimal
    quantity_out: Decimal
    movements: int


@dataclass(frozen=True)
class GroupTotal:
    """Count and summed value of the records owned by one entity"""
    entity_id: int
    count: int
    total: Decimal


@dataclass(frozen=True)
class StateTotals:
    state: str
    lots: int
    quantity: Decimal
    value: Decimal


@dataclass(frozen=True)
class SupplyStock:
    """Snapshot of one supply item's stock levels"""
    id: int
    name: str
    unit: str
    current_stock: Decimal
    minimum_stock: Decimal
    unit_cost: Decimal


def _range_filters(column, start: Optional[datetime], end: Optional[datetime]) -> list:
    filters = []
    if start is not None:
        filters.append(column >= start)
    if end is not None:
        filters.append(column <= end)
    return filters


# ============================================================================
# Aggregate totals
# ============================================================================

def production_totals(
    db: Session, start: Optional[datetime] = None, end: Optional[datetime] = None
) -> ProductionTotals:
    row = db.query(
        func.coalesce(func.sum(ProductionLot.quantity), 0).label("quantity"),
        func.coalesce(func.sum(ProductionLot.total_cost), 0).label("cost"),
        func.count(ProductionLot.id).label("lots"),
    ).filter(*_range_filters(ProductionLot.produced_at, start, end)).one()

    return ProductionTotals(
        quantity=to_decimal(row.quantity),
        cost=to_decimal(row.cost),
        lots=row.lots or 0,
    )


def sales_totals(
    db: Session, start: Optional[datetime] = None, end: Optional[datetime] = None
) -> SalesTotals:
    row = db.query(
        func.coalesce(func.sum(Sale.quantity), 0).label("quantity"),
        func.coalesce(func.sum(Sale.total), 0).label("revenue"),
        func.count(Sale.id).label("sales"),
    ).filter(*_range_filters(Sale.sold_at, start, end)).one()

    return SalesTotals(
        quantity=to_decimal(row.quantity),
        revenue=to_decimal(row.revenue),
        sales=row.sales or 0,
    )


def purchase_totals(
    db: Session, start: Optional[datetime] = None, end: Optional[datetime] = None
) -> PurchaseTotals:
    row = db.query(
        func.coalesce(func.sum(Purchase.quantity), 0).label("quantity"),
        func.coalesce(func.sum(Purchase.total), 0).label("total"),
        func.count(Purchase.id).label("purchases"),
    ).filter(*_range_filters(Purchase.purchased_at, start, end)).one()

    return PurchaseTotals(
        quantity=to_decimal(row.quantity),
        total=to_decimal(row.total),
        purchases=row.purchases or 0,
    )


def movement_totals(
    db: Session, start: Optional[datetime] = None, end: Optional[datetime] = None
) -> MovementTotals:
    inbound = case(
        (SupplyMovement.direction == MovementDirection.IN.value, SupplyMovement.quantity),
        else_=0,
    )
    outbound = case(
        (SupplyMovement.direction == MovementDirection.OUT.value, SupplyMovement.quantity),
        else_=0,
    )
    row = db.query(
        func.coalesce(func.sum(inbound), 0).label("quantity_in"),
        func.coalesce(func.sum(outbound), 0).label("quantity_out"),
        func.count(SupplyMovement.id).label("movements"),
    ).filter(*_range_filters(SupplyMovement.moved_at, start, end)).one()

    return MovementTotals(
        quantity_in=to_decimal(row.quantity_in),
        quantity_out=to_decimal(row.quantity_out),
        movements=row.movements or 0,
    )


# ============================================================================
# Group-by totals
# ============================================================================

def purchases_by_supplier(db: Session, since: Optional[datetime] = None) -> List[GroupTotal]:
    """Purchase count and summed purchase total per supplier, ordered by supplier id."""
    rows = db.query(
        Purchase.supplier_id,
        func.count(Purchase.id).label("count"),
        func.coalesce(func.sum(Purchase.total), 0).label("total"),
    ).filter(
        *_range_filters(Purchase.purchased_at, since, None)
    ).group_by(Purchase.supplier_id).order_by(Purchase.supplier_id).all()

    return [
        GroupTotal(entity_id=r.supplier_id, count=r.count, total=to_decimal(r.total))
        for r in rows
    ]


def lots_by_operator(db: Session, since: Optional[datetime] = None) -> List[GroupTotal]:
    """Lot count and produced kg per operator, ordered by operator id."""
    rows = db.query(
        ProductionLot.operator_id,
        func.count(ProductionLot.id).label("count"),
        func.coalesce(func.sum(ProductionLot.quantity), 0).label("total"),
    ).filter(
        *_range_filters(ProductionLot.produced_at, since, None)
    ).group_by(ProductionLot.operator_id).order_by(ProductionLot.operator_id).all()

    return [
        GroupTotal(entity_id=r.operator_id, count=r.count, total=to_decimal(r.total))
        for r in rows
    ]


def lots_by_state(db: Session) -> List[StateTotals]:
    """Lot count, quantity and cost value per lifecycle state, over all time."""
    rows = db.query(
        ProductionLot.state,
        func.count(ProductionLot.id).label("lots"),
        func.coalesce(func.sum(ProductionLot.quantity), 0).label("quantity"),
        func.coalesce(func.sum(ProductionLot.total_cost), 0).label("value"),
    ).group_by(ProductionLot.state).order_by(ProductionLot.state).all()

    return [
        StateTotals(
            state=r.state,
            lots=r.lots,
            quantity=to_decimal(r.quantity),
            value=to_decimal(r.value),
        )
        for r in rows
    ]


# ============================================================================
# Bulk reads
# ============================================================================

def lot_cost_components(db: Session, since: Optional[datetime] = None) -> List[CostComponents]:
    rows = db.query(
        ProductionLot.cane_cost,
        ProductionLot.labor_cost,
        ProductionLot.energy_cost,
        ProductionLot.packaging_cost,
        ProductionLot.transport_cost,
    ).filter(
        *_range_filters(ProductionLot.produced_at, since, None)
    ).order_by(ProductionLot.id).all()

    return [
        CostComponents(
            cane=to_decimal(r.cane_cost),
            labor=to_decimal(r.labor_cost),
            energy=to_decimal(r.energy_cost),
            packaging=to_decimal(r.packaging_cost),
            transport=to_decimal(r.transport_cost),
        )
        for r in rows
    ]


def active_supply_items(db: Session) -> List[SupplyStock]:
    """
    All active supply items, ordered by name.

    Low-stock detection compares two columns of the same row, so it is done
    by the caller on this snapshot rather than pushed into the query.
    """
    items = db.query(SupplyItem).filter(
        SupplyItem.active.is_(True)
    ).order_by(SupplyItem.name).all()

    return [
        SupplyStock(
            id=item.id,
            name=item.name,
            unit=item.unit,
            current_stock=to_decimal(item.current_stock),
            minimum_stock=to_decimal(item.minimum_stock),
            unit_cost=to_decimal(item.unit_cost),
        )
        for item in items
    ]


# ============================================================================
# Single-record lookups
# ============================================================================

def supplier_name(db: Session, supplier_id: int) -> Optional[str]:
    row = db.query(Supplier.name).filter(Supplier.id == supplier_id).first()
    return row.name if row else None


def operator_name(db: Session, user_id: int) -> Optional[str]:
    row = db.query(User.name).filter(User.id == user_id).first()
    return row.name if row else None
