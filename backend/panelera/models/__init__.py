"""Database models"""
from panelera.models.user import User
from panelera.models.production_lot import ProductionLot, Sale
from panelera.models.supplier import Supplier, Purchase
from panelera.models.supply import SupplyItem, SupplyMovement

__all__ = [
    # Users
    "User",
    # Production
    "ProductionLot",
    "Sale",
    # Purchasing
    "Supplier",
    "Purchase",
    # Raw-material inventory
    "SupplyItem",
    "SupplyMovement",
]
