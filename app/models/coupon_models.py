import enum
from sqlalchemy import (
    Column, Integer, String, Numeric, Boolean, ForeignKey, Enum, DateTime, UniqueConstraint, Index
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.db import Base


class DiscountType(str, enum.Enum):
    DOLLAR = "dollar"
    PERCENT = "percent"


class Coupon(Base):
    __tablename__ = "coupons"

    id = Column(Integer, primary_key=True, index=True)
    merchant_id = Column(Integer, ForeignKey("merchants.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(100), nullable=False)
    # case-sensitive, unique per merchant
    code = Column(String(50), nullable=False)
    discount_type = Column(
        Enum(DiscountType, name="discount_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    discount_value = Column(Numeric(10, 2), nullable=False)
    active = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now())

    merchant = relationship("Merchant", back_populates="coupons", lazy="selectin")
    # passive_deletes leaves invoices in place; the FK nulls coupon_id
    invoices = relationship("Invoice", back_populates="coupon", passive_deletes=True, lazy="select")

    __table_args__ = (
        UniqueConstraint("merchant_id", "code", name="uq_coupon_merchant_code"),
        Index("ix_coupon_merchant_active", "merchant_id", "active"),
    )

    def __repr__(self):
        return f"<Coupon(id={self.id}, code='{self.code}', active={self.active})>"
