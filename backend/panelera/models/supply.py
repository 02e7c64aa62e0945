"""
Raw-material inventory models
"""
from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Text, Boolean
from sqlalchemy.orm import relationship
from datetime import datetime

from panelera.db.base import Base


class SupplyItem(Base):
    """Raw material kept in stock (lime, packaging, firewood, ...)"""
    __tablename__ = "supply_items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    unit = Column(String(20), nullable=False)  # kg, unidad, litro

    minimum_stock = Column(Numeric(12, 2), default=0, nullable=False)
    current_stock = Column(Numeric(12, 2), default=0, nullable=False)
    unit_cost = Column(Numeric(14, 2), default=0, nullable=False)
    active = Column(Boolean, default=True, nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    movements = relationship("SupplyMovement", back_populates="supply_item")

    def __repr__(self):
        return f"<SupplyItem {self.name}: {self.current_stock} {self.unit}>"


class SupplyMovement(Base):
    """Stock entry or exit for a supply item"""
    __tablename__ = "supply_movements"

    id = Column(Integer, primary_key=True, index=True)
    supply_item_id = Column(Integer, ForeignKey("supply_items.id"), nullable=False, index=True)

    direction = Column(String(10), nullable=False)  # IN, OUT
    quantity = Column(Numeric(12, 2), nullable=False)
    reason = Column(String(255), nullable=True)
    moved_at = Column(DateTime, default=datetime.now, nullable=False, index=True)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    supply_item = relationship("SupplyItem", back_populates="movements")

    def __repr__(self):
        return f"<SupplyMovement {self.direction} {self.quantity} item={self.supply_item_id}>"
