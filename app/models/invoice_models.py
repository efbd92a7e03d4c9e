# app/models/invoice_models.py
import enum
from sqlalchemy import (
    Column, Integer, String, ForeignKey, DateTime, Enum, Index, CheckConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.db import Base


class InvoiceStatus(str, enum.Enum):
    SHIPPED = "shipped"
    PACKAGED = "packaged"
    RETURNED = "returned"
    PENDING = "pending"


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)

    # Foreign Keys
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True)
    merchant_id = Column(Integer, ForeignKey("merchants.id", ondelete="CASCADE"), nullable=False, index=True)
    coupon_id = Column(Integer, ForeignKey("coupons.id", ondelete="SET NULL"), nullable=True, index=True)

    status = Column(
        Enum(InvoiceStatus, name="invoice_status", values_callable=lambda e: [m.value for m in e]),
        default=InvoiceStatus.PENDING,
        nullable=False,
    )

    # Audit fields
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now())

    # Relationships
    invoice_items = relationship("InvoiceItem", back_populates="invoice", cascade="all, delete-orphan", lazy="selectin")
    transactions = relationship("Transaction", back_populates="invoice", cascade="all, delete-orphan", lazy="selectin")
    customer = relationship("Customer", back_populates="invoices", lazy="selectin")
    merchant = relationship("Merchant", back_populates="invoices", lazy="selectin")
    coupon = relationship("Coupon", back_populates="invoices", lazy="selectin")

    __table_args__ = (
        Index("ix_invoice_merchant_status", "merchant_id", "status"),
        Index("ix_invoice_coupon_status", "coupon_id", "status"),
    )

    def __repr__(self):
        return f"<Invoice(id={self.id}, merchant_id={self.merchant_id}, status='{self.status}')>"


# ------------------------------------------------------
# INVOICE ITEM MODEL
# ------------------------------------------------------
class InvoiceItem(Base):
    __tablename__ = "invoice_items"

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True)
    # nullable: a deleted item leaves the line in place and it prices at 0
    item_id = Column(Integer, ForeignKey("items.id", ondelete="SET NULL"), nullable=True, index=True)

    quantity = Column(Integer, nullable=False, default=0)

    invoice = relationship("Invoice", back_populates="invoice_items", lazy="joined")
    item = relationship("Item", lazy="selectin")

    __table_args__ = (
        CheckConstraint(quantity >= 0, name="check_invoice_item_quantity_non_negative"),
    )

    def __repr__(self):
        return f"<InvoiceItem(id={self.id}, item_id={self.item_id}, quantity={self.quantity})>"


# ------------------------------------------------------
# TRANSACTION MODEL
# ------------------------------------------------------
class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True)

    credit_card_number = Column(String(32), nullable=True)
    result = Column(String(20), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    invoice = relationship("Invoice", back_populates="transactions", lazy="joined")

    def __repr__(self):
        return f"<Transaction(id={self.id}, invoice_id={self.invoice_id}, result='{self.result}')>"
