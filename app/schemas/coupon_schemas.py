from pydantic import BaseModel, ConfigDict, Field, StrictBool
from typing import List, Optional
from decimal import Decimal
from app.models.coupon_models import DiscountType


# Field rules live in app.services.coupon_rules; the schemas only shape input.
class CouponCreate(BaseModel):
    name: Optional[str] = None
    code: Optional[str] = None
    discount_value: Optional[Decimal] = None
    discount_type: Optional[str] = None
    active: Optional[StrictBool] = None


class CouponUpdate(BaseModel):
    name: Optional[str] = None
    code: Optional[str] = None
    discount_value: Optional[Decimal] = None
    discount_type: Optional[str] = None
    active: Optional[StrictBool] = None


class CouponOut(BaseModel):
    id: int
    merchant_id: int
    name: str
    code: str
    discount_value: Decimal
    discount_type: DiscountType
    active: bool
    usage_count: int = 0

    model_config = ConfigDict(from_attributes=True)


# -------------------------------------------------------------------------
# Quote Schemas
# -------------------------------------------------------------------------
class QuoteLine(BaseModel):
    item_id: int
    quantity: int = Field(ge=0)


class QuoteRequest(BaseModel):
    lines: List[QuoteLine] = []


class QuoteOut(BaseModel):
    coupon_id: int
    merchant_id: int
    applicable: bool
    subtotal: Decimal
    total: Decimal
    unresolved_item_ids: List[int] = []
