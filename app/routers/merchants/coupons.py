from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.coupon_schemas import CouponCreate, CouponUpdate, CouponOut, QuoteRequest, QuoteOut
from app.schemas.response_schemas import rejected_detail
from app.services import coupon_service
from app.services.coupon_rules import CouponRuleError

router = APIRouter(prefix="/{merchant_id}/coupons", tags=["Coupons"])


# GET /api/v1/merchants/{merchant_id}/coupons
@router.get("", response_model=List[CouponOut])
async def route_list_coupons(
    merchant_id: int,
    db: AsyncSession = Depends(get_db),
    sort_by: Optional[str] = Query(None, description="Filter by active flag: active or inactive"),
):
    return await coupon_service.list_coupons(db, merchant_id, sort_by)


# GET /api/v1/merchants/{merchant_id}/coupons/{coupon_id}
@router.get("/{coupon_id}", response_model=CouponOut)
async def route_get_coupon(merchant_id: int, coupon_id: int, db: AsyncSession = Depends(get_db)):
    return await coupon_service.get_coupon(db, merchant_id, coupon_id)


# POST /api/v1/merchants/{merchant_id}/coupons
@router.post("", response_model=CouponOut, status_code=201)
async def route_create_coupon(merchant_id: int, payload: CouponCreate, db: AsyncSession = Depends(get_db)):
    """
    Create a coupon. All fields are required; a merchant may hold at most
    five active coupons and codes are unique per merchant.
    """
    try:
        return await coupon_service.create_coupon(db, merchant_id, payload)
    except CouponRuleError as e:
        raise HTTPException(status_code=422, detail=rejected_detail(e))


# PATCH /api/v1/merchants/{merchant_id}/coupons/{coupon_id}
@router.patch("/{coupon_id}", response_model=CouponOut)
async def route_update_coupon(
    merchant_id: int, coupon_id: int, payload: CouponUpdate, db: AsyncSession = Depends(get_db)
):
    """Partial update. Deactivation is refused while a pending invoice uses the coupon."""
    try:
        return await coupon_service.update_coupon(db, merchant_id, coupon_id, payload)
    except CouponRuleError as e:
        raise HTTPException(status_code=422, detail=rejected_detail(e))


# POST /api/v1/merchants/{merchant_id}/coupons/{coupon_id}/quote
@router.post("/{coupon_id}/quote", response_model=QuoteOut)
async def route_quote_coupon(
    merchant_id: int, coupon_id: int, payload: QuoteRequest, db: AsyncSession = Depends(get_db)
):
    return await coupon_service.quote_coupon(db, merchant_id, coupon_id, payload)
