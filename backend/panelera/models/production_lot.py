"""
Production lot and sale models
"""
from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from datetime import datetime

from panelera.db.base import Base


class ProductionLot(Base):
    """One batch of produced panela with its own cost breakdown, price and state"""
    __tablename__ = "production_lots"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(50), unique=True, nullable=False, index=True)  # LOTE-...

    quantity = Column(Numeric(12, 2), nullable=False)  # kg
    produced_at = Column(DateTime, default=datetime.now, nullable=False, index=True)

    # Cost breakdown
    cane_cost = Column(Numeric(14, 2), default=0, nullable=False)
    labor_cost = Column(Numeric(14, 2), default=0, nullable=False)
    energy_cost = Column(Numeric(14, 2), default=0, nullable=False)
    packaging_cost = Column(Numeric(14, 2), default=0, nullable=False)
    transport_cost = Column(Numeric(14, 2), default=0, nullable=False)
    total_cost = Column(Numeric(14, 2), default=0, nullable=False)

    # Pricing
    profit_margin = Column(Numeric(6, 2), default=0, nullable=False)  # percent
    suggested_price = Column(Numeric(14, 2), default=0, nullable=False)

    state = Column(String(20), default="IN_PRODUCTION", nullable=False, index=True)
    # IN_PRODUCTION, AVAILABLE, SOLD, EXPIRED

    operator_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    description = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    operator = relationship("User", back_populates="lots")
    sales = relationship("Sale", back_populates="lot")

    def __repr__(self):
        return f"<ProductionLot {self.code}: {self.quantity} kg ({self.state})>"


class Sale(Base):
    """Sale of part or all of a lot"""
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)
    lot_id = Column(Integer, ForeignKey("production_lots.id"), nullable=False, index=True)

    quantity = Column(Numeric(12, 2), nullable=False)
    unit_price = Column(Numeric(14, 2), nullable=False)
    total = Column(Numeric(14, 2), nullable=False)

    customer = Column(String(200), nullable=True)
    sold_at = Column(DateTime, default=datetime.now, nullable=False, index=True)
    notes = Column(Text, nullable=True)

    lot = relationship("ProductionLot", back_populates="sales")

    def __repr__(self):
        return f"<Sale {self.id}: {self.quantity} @ {self.unit_price}>"
