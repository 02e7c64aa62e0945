"""
Test data factories for Panelera.

Provides functions to create test entities with sensible defaults.

Usage:
    from tests.factories import create_test_user, create_test_lot

    def test_something(db_session):
        operator = create_test_user(db_session, role="OPERATOR")
        lot = create_test_lot(db_session, operator=operator, cane_cost=Decimal("100000"))
"""
from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional
from sqlalchemy.orm import Session


# =============================================================================
# SEQUENCE MANAGEMENT
# =============================================================================

_sequences: Dict[str, int] = {}


def reset_sequences():
    """Reset all sequences. Call between tests for predictable codes."""
    global _sequences
    _sequences = {}


def _next(name: str) -> int:
    """Get next sequence number for a given entity type."""
    _sequences[name] = _sequences.get(name, 0) + 1
    return _sequences[name]


# =============================================================================
# USERS
# =============================================================================

def create_test_user(
    db: Session,
    email: Optional[str] = None,
    name: Optional[str] = None,
    role: str = "OPERATOR",
    is_active: bool = True,
) -> "User":
    from panelera.models.user import User

    seq = _next("user")
    user = User(
        email=email or f"user{seq}@example.com",
        name=name if name is not None else f"Usuario {seq}",
        role=role,
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


# =============================================================================
# PRODUCTION
# =============================================================================

def create_test_lot(
    db: Session,
    operator=None,
    quantity: Decimal = Decimal("100"),
    produced_at: Optional[datetime] = None,
    cane_cost: Decimal = Decimal("0"),
    labor_cost: Decimal = Decimal("0"),
    energy_cost: Decimal = Decimal("0"),
    packaging_cost: Decimal = Decimal("0"),
    transport_cost: Decimal = Decimal("0"),
    profit_margin: Decimal = Decimal("20"),
    state: str = "AVAILABLE",
    code: Optional[str] = None,
) -> "ProductionLot":
    """
    Create a production lot.

    total_cost and suggested_price are derived from the cost breakdown the
    same way the lot registration form derives them.
    """
    from panelera.models.production_lot import ProductionLot
    from panelera.services.cost_calculator import CostComponents, suggested_price

    if operator is None:
        operator = create_test_user(db)

    total = CostComponents(
        cane=cane_cost,
        labor=labor_cost,
        energy=energy_cost,
        packaging=packaging_cost,
        transport=transport_cost,
    ).total

    lot = ProductionLot(
        code=code or f"LOTE-TEST-{_next('lot'):04d}",
        quantity=quantity,
        produced_at=produced_at or datetime.now(),
        cane_cost=cane_cost,
        labor_cost=labor_cost,
        energy_cost=energy_cost,
        packaging_cost=packaging_cost,
        transport_cost=transport_cost,
        total_cost=total,
        profit_margin=profit_margin,
        suggested_price=suggested_price(total, profit_margin),
        state=state,
        operator_id=operator.id,
    )
    db.add(lot)
    db.commit()
    db.refresh(lot)
    return lot


def create_test_sale(
    db: Session,
    lot,
    quantity: Decimal = Decimal("10"),
    unit_price: Decimal = Decimal("5000"),
    total: Optional[Decimal] = None,
    sold_at: Optional[datetime] = None,
    customer: Optional[str] = "Cliente de prueba",
) -> "Sale":
    from panelera.models.production_lot import Sale

    sale = Sale(
        lot_id=lot.id,
        quantity=quantity,
        unit_price=unit_price,
        total=total if total is not None else quantity * unit_price,
        customer=customer,
        sold_at=sold_at or datetime.now(),
    )
    db.add(sale)
    db.commit()
    db.refresh(sale)
    return sale


# =============================================================================
# PURCHASING
# =============================================================================

def create_test_supplier(db: Session, name: Optional[str] = None, **overrides) -> "Supplier":
    from panelera.models.supplier import Supplier

    supplier = Supplier(
        name=name or f"Proveedor {_next('supplier'):02d}",
        contact=overrides.pop("contact", "Contacto"),
        active=overrides.pop("active", True),
        **overrides,
    )
    db.add(supplier)
    db.commit()
    db.refresh(supplier)
    return supplier


def create_test_purchase(
    db: Session,
    supplier,
    total: Decimal = Decimal("100000"),
    quantity: Decimal = Decimal("1000"),
    purchased_at: Optional[datetime] = None,
) -> "Purchase":
    from panelera.models.supplier import Purchase

    purchase = Purchase(
        supplier_id=supplier.id,
        quantity=quantity,
        unit_price=total / quantity if quantity else Decimal("0"),
        total=total,
        purchased_at=purchased_at or datetime.now(),
    )
    db.add(purchase)
    db.commit()
    db.refresh(purchase)
    return purchase


# =============================================================================
# RAW-MATERIAL INVENTORY
# =============================================================================

def create_test_supply_item(
    db: Session,
    name: Optional[str] = None,
    current_stock: Decimal = Decimal("50"),
    minimum_stock: Decimal = Decimal("10"),
    unit_cost: Decimal = Decimal("1000"),
    unit: str = "kg",
    active: bool = True,
) -> "SupplyItem":
    from panelera.models.supply import SupplyItem

    item = SupplyItem(
        name=name or f"Insumo {_next('supply'):02d}",
        unit=unit,
        current_stock=current_stock,
        minimum_stock=minimum_stock,
        unit_cost=unit_cost,
        active=active,
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


def create_test_movement(
    db: Session,
    supply_item,
    direction: str = "IN",
    quantity: Decimal = Decimal("5"),
    moved_at: Optional[datetime] = None,
    user=None,
    reason: str = "Prueba",
) -> "SupplyMovement":
    from panelera.models.supply import SupplyMovement

    movement = SupplyMovement(
        supply_item_id=supply_item.id,
        direction=direction,
        quantity=quantity,
        reason=reason,
        moved_at=moved_at or datetime.now(),
        user_id=user.id if user else None,
    )
    db.add(movement)
    db.commit()
    db.refresh(movement)
    return movement
