from pydantic import BaseModel, ConfigDict
from decimal import Decimal
from typing import Optional
from datetime import datetime
from app.models.invoice_models import InvoiceStatus


class InvoiceOut(BaseModel):
    id: int
    customer_id: int
    merchant_id: int
    coupon_id: Optional[int] = None
    status: InvoiceStatus
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class InvoiceTotalOut(BaseModel):
    invoice_id: int
    merchant_id: int
    coupon_id: Optional[int] = None
    subtotal: Decimal
    total: Decimal
