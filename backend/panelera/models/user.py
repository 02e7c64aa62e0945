"""
User model - operators and administrators of the mill
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from panelera.db.base import Base


class User(Base):
    """Staff account. Operators register production lots; admins see everything."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(200), nullable=True)
    role = Column(String(20), default="OPERATOR", nullable=False)  # ADMIN, OPERATOR
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=False), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=False), server_default=func.now(), onupdate=func.now(), nullable=False)

    lots = relationship("ProductionLot", back_populates="operator")

    @property
    def is_admin(self) -> bool:
        return self.role == "ADMIN"

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"
