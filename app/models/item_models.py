from decimal import Decimal
from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from app.core.db import Base


class Item(Base):
    __tablename__ = "items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), index=True, nullable=False)
    description = Column(String(1000), nullable=True)
    unit_price = Column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))

    merchant_id = Column(Integer, ForeignKey("merchants.id", ondelete="CASCADE"), nullable=False, index=True)
    merchant = relationship("Merchant", back_populates="items", lazy="selectin")

    __table_args__ = (
        CheckConstraint(unit_price >= 0, name="check_item_unit_price_non_negative"),
    )

    def __repr__(self):
        return f"<Item(id={self.id}, name='{self.name}', merchant_id={self.merchant_id})>"
