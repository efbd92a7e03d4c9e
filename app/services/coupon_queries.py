# app/services/coupon_queries.py
from typing import Dict, List, Optional
from sqlalchemy import select, func, exists
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.coupon_models import Coupon
from app.models.invoice_models import Invoice, InvoiceStatus
from app.models.item_models import Item


async def active_coupon_count(db: AsyncSession, merchant_id: int, excluding_coupon_id: Optional[int] = None) -> int:
    stmt = select(func.count(Coupon.id)).where(Coupon.merchant_id == merchant_id, Coupon.active == True)
    if excluding_coupon_id is not None:
        stmt = stmt.where(Coupon.id != excluding_coupon_id)
    result = await db.execute(stmt)
    return result.scalar_one()


async def coupon_exists_with_code(
    db: AsyncSession, merchant_id: int, code: str, excluding_coupon_id: Optional[int] = None
) -> bool:
    # exact, case-sensitive match
    condition = [Coupon.merchant_id == merchant_id, Coupon.code == code]
    if excluding_coupon_id is not None:
        condition.append(Coupon.id != excluding_coupon_id)
    result = await db.execute(select(exists().where(*condition)))
    return bool(result.scalar())


async def pending_invoice_exists(db: AsyncSession, coupon_id: int) -> bool:
    result = await db.execute(
        select(exists().where(Invoice.coupon_id == coupon_id, Invoice.status == InvoiceStatus.PENDING))
    )
    return bool(result.scalar())


async def resolve_item(db: AsyncSession, item_id: Optional[int]) -> Optional[Item]:
    if item_id is None:
        return None
    return await db.get(Item, item_id)


async def usage_count(db: AsyncSession, coupon_id: int) -> int:
    """Number of invoices referencing the coupon, in any status."""
    result = await db.execute(select(func.count(Invoice.id)).where(Invoice.coupon_id == coupon_id))
    return result.scalar_one()


async def usage_counts(db: AsyncSession, coupon_ids: List[int]) -> Dict[int, int]:
    """usage_count for many coupons in one query; coupons never used map to 0."""
    if not coupon_ids:
        return {}
    result = await db.execute(
        select(Invoice.coupon_id, func.count(Invoice.id))
        .where(Invoice.coupon_id.in_(coupon_ids))
        .group_by(Invoice.coupon_id)
    )
    counts = dict(result.all())
    return {coupon_id: counts.get(coupon_id, 0) for coupon_id in coupon_ids}
