#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Panelera - Demo Data Seeder

Creates a small panela mill so the analytics report and dashboard have
something to show:
- Admin and operator users
- Suppliers and their cane purchases
- Raw-material supplies (one of them below its minimum stock)
- Production lots over the last six months with sales

Usage:
  cd backend
  python scripts/seed_demo_data.py

Running it twice does not duplicate users, suppliers or supplies.
"""
import os
import sys
from datetime import datetime
from decimal import Decimal

from dateutil.relativedelta import relativedelta

# Add project root to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from panelera.db.base import Base
from panelera.db.session import SessionLocal, engine
from panelera.models import (
    ProductionLot,
    Purchase,
    Sale,
    Supplier,
    SupplyItem,
    SupplyMovement,
    User,
)
from panelera.services.cost_calculator import CostComponents, suggested_price

USERS = [
    {"email": "admin@panela.com", "name": "Administrador", "role": "ADMIN"},
    {"email": "operario@panela.com", "name": "Operario", "role": "OPERATOR"},
]

SUPPLIERS = [
    {
        "name": "Finca La Esperanza",
        "contact": "Carlos Rodríguez",
        "phone": "+57 300 123 4567",
        "email": "carlos@fincaesperanza.com",
        "address": "Vereda El Trapiche, Santander",
    },
    {
        "name": "Cooperativa Panelera",
        "contact": "María González",
        "phone": "+57 301 987 6543",
        "email": "maria@cooppanelera.com",
        "address": "Centro, Barbosa, Santander",
    },
]

SUPPLIES = [
    {
        "name": "Bolsas de 500g",
        "description": "Bolsas plásticas para empaque de panela",
        "unit": "unidades",
        "minimum_stock": Decimal("100"),
        "current_stock": Decimal("500"),
        "unit_cost": Decimal("50"),
    },
    {
        "name": "Etiquetas adhesivas",
        "description": "Etiquetas con información del producto",
        "unit": "unidades",
        "minimum_stock": Decimal("50"),
        "current_stock": Decimal("40"),
        "unit_cost": Decimal("25"),
    },
    {
        "name": "Cajas de cartón",
        "description": "Cajas para transporte de panela",
        "unit": "unidades",
        "minimum_stock": Decimal("20"),
        "current_stock": Decimal("100"),
        "unit_cost": Decimal("1500"),
    },
]


def _get_or_create(db, model, lookup: dict, values: dict):
    instance = db.query(model).filter_by(**lookup).first()
    if instance:
        return instance, False
    instance = model(**lookup, **values)
    db.add(instance)
    db.flush()
    return instance, True


def create_demo_data():
    """Create demo users, suppliers, supplies, lots and sales"""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    try:
        print("Creating Panelera demo data...")
        print("=" * 50)

        # ========================================
        # 1. USERS
        # ========================================
        users = {}
        for data in USERS:
            user, created = _get_or_create(
                db, User, {"email": data["email"]}, {"name": data["name"], "role": data["role"]}
            )
            users[data["role"]] = user
            if created:
                print(f"   Created user: {user.email} ({user.role})")

        # ========================================
        # 2. SUPPLIERS AND PURCHASES
        # ========================================
        suppliers = []
        for data in SUPPLIERS:
            values = {k: v for k, v in data.items() if k != "name"}
            supplier, created = _get_or_create(db, Supplier, {"name": data["name"]}, values)
            suppliers.append(supplier)
            if created:
                print(f"   Created supplier: {supplier.name}")

        now = datetime.now()
        purchases = [
            (suppliers[0], Decimal("100"), Decimal("3500"), "Panela de alta calidad"),
            (suppliers[1], Decimal("150"), Decimal("3200"), "Entrega puntual"),
        ]
        for supplier, quantity, unit_price, notes in purchases:
            db.add(Purchase(
                supplier_id=supplier.id,
                quantity=quantity,
                unit_price=unit_price,
                total=quantity * unit_price,
                purchased_at=now,
                notes=notes,
            ))

        # ========================================
        # 3. SUPPLIES
        # ========================================
        for data in SUPPLIES:
            values = {k: v for k, v in data.items() if k != "name"}
            item, created = _get_or_create(db, SupplyItem, {"name": data["name"]}, values)
            if created:
                print(f"   Created supply: {item.name}")
                db.add(SupplyMovement(
                    supply_item_id=item.id,
                    direction="IN",
                    quantity=item.current_stock,
                    reason="Inventario inicial",
                    moved_at=now,
                    user_id=users["ADMIN"].id,
                ))

        # ========================================
        # 4. LOTS AND SALES (last six months)
        # ========================================
        operator = users["OPERATOR"]
        lots_created = 0
        for months_ago in range(5, -1, -1):
            produced_at = (now - relativedelta(months=months_ago)).replace(day=5, hour=8, minute=0)
            quantity = Decimal(400 + 50 * (5 - months_ago))
            costs = CostComponents(
                cane=quantity * Decimal("1800"),
                labor=quantity * Decimal("700"),
                energy=quantity * Decimal("250"),
                packaging=quantity * Decimal("150"),
                transport=quantity * Decimal("100"),
            )
            state = "SOLD" if months_ago > 1 else ("AVAILABLE" if months_ago == 1 else "IN_PRODUCTION")
            code = f"LOTE-{produced_at:%Y%m}-001"
            if db.query(ProductionLot).filter(ProductionLot.code == code).first():
                continue

            lot = ProductionLot(
                code=code,
                quantity=quantity,
                produced_at=produced_at,
                cane_cost=costs.cane,
                labor_cost=costs.labor,
                energy_cost=costs.energy,
                packaging_cost=costs.packaging,
                transport_cost=costs.transport,
                total_cost=costs.total,
                profit_margin=Decimal("20"),
                suggested_price=suggested_price(costs.total, Decimal("20")),
                state=state,
                operator_id=operator.id,
            )
            db.add(lot)
            db.flush()
            lots_created += 1

            if state == "SOLD":
                unit_price = Decimal("3600")
                db.add(Sale(
                    lot_id=lot.id,
                    quantity=quantity,
                    unit_price=unit_price,
                    total=quantity * unit_price,
                    customer="Distribuidora Santander",
                    sold_at=produced_at + relativedelta(days=10),
                ))

        db.commit()

        print("\n" + "=" * 50)
        print("Demo data created")
        print(f"   Lots: {lots_created}")
        print(f"   Suppliers: {len(suppliers)}")
        print(f"   Supplies: {len(SUPPLIES)}")

    except Exception as e:
        print(f"\nError creating demo data: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    create_demo_data()
