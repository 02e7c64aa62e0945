"""
Supplier and purchase models
"""
from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Text, Boolean
from sqlalchemy.orm import relationship
from datetime import datetime

from panelera.db.base import Base


class Supplier(Base):
    """Cane supplier"""
    __tablename__ = "suppliers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), unique=True, nullable=False)
    contact = Column(String(200), nullable=True)
    phone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    address = Column(Text, nullable=True)
    active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    purchases = relationship("Purchase", back_populates="supplier")

    def __repr__(self):
        return f"<Supplier {self.name}>"


class Purchase(Base):
    """Raw-material purchase from a supplier"""
    __tablename__ = "purchases"

    id = Column(Integer, primary_key=True, index=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=False, index=True)

    quantity = Column(Numeric(12, 2), nullable=False)
    unit_price = Column(Numeric(14, 2), nullable=False)
    total = Column(Numeric(14, 2), nullable=False)

    purchased_at = Column(DateTime, default=datetime.now, nullable=False, index=True)
    notes = Column(Text, nullable=True)

    supplier = relationship("Supplier", back_populates="purchases")

    def __repr__(self):
        return f"<Purchase {self.id}: supplier={self.supplier_id} total={self.total}>"
