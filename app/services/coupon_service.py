# app/services/coupon_service.py
from typing import List, Optional
import logging

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.coupon_models import Coupon, DiscountType
from app.models.merchant_models import Merchant
from app.schemas.coupon_schemas import CouponCreate, CouponUpdate, CouponOut, QuoteRequest, QuoteOut
from app.schemas.response_schemas import not_found_detail
from app.services.coupon_queries import (
    active_coupon_count,
    coupon_exists_with_code,
    pending_invoice_exists,
    resolve_item,
    usage_count,
    usage_counts,
)
from app.services.coupon_rules import (
    CouponRuleError,
    DuplicateCodeError,
    is_applicable_to,
    validate_for_create,
    validate_for_update,
)
from app.services.invoice_calculator import apply_discount, subtotal_for_merchant

logger = logging.getLogger(__name__)


# --------------------------
# Helpers
# --------------------------
async def get_merchant(db: AsyncSession, merchant_id: int, lock: bool = False) -> Merchant:
    """
    Fetch a merchant or raise 404. ``lock`` takes a row lock for the rest of
    the transaction so concurrent coupon writes for one merchant serialize.
    """
    stmt = select(Merchant).where(Merchant.id == merchant_id)
    if lock:
        stmt = stmt.with_for_update()
    result = await db.execute(stmt)
    merchant = result.scalar_one_or_none()
    if not merchant:
        raise HTTPException(status_code=404, detail=not_found_detail("Merchant", merchant_id))
    return merchant


async def _get_coupon(db: AsyncSession, merchant_id: int, coupon_id: int) -> Coupon:
    result = await db.execute(
        select(Coupon).where(Coupon.id == coupon_id, Coupon.merchant_id == merchant_id)
    )
    coupon = result.scalar_one_or_none()
    if not coupon:
        raise HTTPException(status_code=404, detail=not_found_detail("Coupon", coupon_id))
    return coupon


def _to_out(coupon: Coupon, used: int) -> CouponOut:
    return CouponOut.model_validate(coupon).model_copy(update={"usage_count": used})


async def _commit_or_duplicate(db: AsyncSession, coupon: Coupon):
    # uq_coupon_merchant_code backs up the code check if a concurrent write slipped past it
    code = coupon.code
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateCodeError(code)
    await db.refresh(coupon)


# --------------------------
# READ
# --------------------------
async def list_coupons(db: AsyncSession, merchant_id: int, sort_by: Optional[str] = None) -> List[CouponOut]:
    """
    All coupons of a merchant. ``sort_by`` of "active" or "inactive" filters
    on the active flag; any other value returns everything.
    """
    await get_merchant(db, merchant_id)

    stmt = select(Coupon).where(Coupon.merchant_id == merchant_id)
    if sort_by == "active":
        stmt = stmt.where(Coupon.active == True)
    elif sort_by == "inactive":
        stmt = stmt.where(Coupon.active == False)

    result = await db.execute(stmt.order_by(Coupon.id))
    coupons = result.scalars().all()
    counts = await usage_counts(db, [c.id for c in coupons])
    return [_to_out(c, counts[c.id]) for c in coupons]


async def get_coupon(db: AsyncSession, merchant_id: int, coupon_id: int) -> CouponOut:
    coupon = await _get_coupon(db, merchant_id, coupon_id)
    return _to_out(coupon, await usage_count(db, coupon.id))


# --------------------------
# CREATE
# --------------------------
async def create_coupon(db: AsyncSession, merchant_id: int, payload: CouponCreate) -> CouponOut:
    await get_merchant(db, merchant_id, lock=True)
    data = payload.model_dump()

    try:
        validate_for_create(
            data,
            active_count=await active_coupon_count(db, merchant_id),
            code_taken=bool(data["code"]) and await coupon_exists_with_code(db, merchant_id, data["code"]),
        )
    except CouponRuleError as e:
        await db.rollback()
        logger.warning("Rejected coupon for merchant %s: %s", merchant_id, e)
        raise

    coupon = Coupon(
        merchant_id=merchant_id,
        name=data["name"],
        code=data["code"],
        discount_value=data["discount_value"],
        discount_type=DiscountType(data["discount_type"]),
        active=data["active"],
    )
    db.add(coupon)
    await _commit_or_duplicate(db, coupon)

    logger.info("Created coupon %s (%s) for merchant %s", coupon.id, coupon.code, merchant_id)
    return _to_out(coupon, 0)


# --------------------------
# UPDATE
# --------------------------
async def update_coupon(db: AsyncSession, merchant_id: int, coupon_id: int, payload: CouponUpdate) -> CouponOut:
    await get_merchant(db, merchant_id, lock=True)
    coupon = await _get_coupon(db, merchant_id, coupon_id)
    changes = payload.model_dump(exclude_unset=True)

    code = changes.get("code")
    try:
        validate_for_update(
            coupon,
            changes,
            "active" in changes and await pending_invoice_exists(db, coupon.id),
            active_count=await active_coupon_count(db, merchant_id, excluding_coupon_id=coupon.id),
            code_taken=bool(code) and await coupon_exists_with_code(
                db, merchant_id, code, excluding_coupon_id=coupon.id
            ),
        )
    except CouponRuleError as e:
        await db.rollback()
        logger.warning("Rejected update of coupon %s: %s", coupon_id, e)
        raise

    if "discount_type" in changes:
        changes["discount_type"] = DiscountType(changes["discount_type"])
    for key, value in changes.items():
        setattr(coupon, key, value)

    await _commit_or_duplicate(db, coupon)

    logger.info("Updated coupon %s (fields: %s)", coupon.id, ", ".join(sorted(changes)) or "none")
    return _to_out(coupon, await usage_count(db, coupon.id))


# --------------------------
# QUOTE
# --------------------------
async def quote_coupon(db: AsyncSession, merchant_id: int, coupon_id: int, payload: QuoteRequest) -> QuoteOut:
    """
    Price a prospective basket with the coupon. Lines whose item cannot be
    resolved contribute nothing and are reported back.
    """
    coupon = await _get_coupon(db, merchant_id, coupon_id)

    pairs = []
    unresolved = []
    for line in payload.lines:
        item = await resolve_item(db, line.item_id)
        if item is None:
            unresolved.append(line.item_id)
        pairs.append((item, line.quantity))

    subtotal = subtotal_for_merchant(pairs, merchant_id)
    return QuoteOut(
        coupon_id=coupon.id,
        merchant_id=merchant_id,
        applicable=is_applicable_to(coupon, [item for item, _ in pairs if item is not None]),
        subtotal=subtotal,
        total=apply_discount(subtotal, coupon, merchant_id),
        unresolved_item_ids=unresolved,
    )
