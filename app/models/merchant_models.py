from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.db import Base


class Merchant(Base):
    __tablename__ = "merchants"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now())

    coupons = relationship("Coupon", back_populates="merchant", cascade="all, delete-orphan", lazy="select")
    items = relationship("Item", back_populates="merchant", cascade="all, delete-orphan", lazy="select")
    invoices = relationship("Invoice", back_populates="merchant", lazy="select")

    def __repr__(self):
        return f"<Merchant(id={self.id}, name='{self.name}')>"
