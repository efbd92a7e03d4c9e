# app/services/invoice_service.py
from typing import List, Optional
import logging

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.invoice_models import Invoice, InvoiceItem, InvoiceStatus
from app.schemas.invoice_schemas import InvoiceTotalOut
from app.schemas.response_schemas import not_found_detail
from app.services.coupon_service import get_merchant
from app.services.invoice_calculator import subtotal_for_merchant, total_for_merchant

logger = logging.getLogger(__name__)


async def get_invoices_by_merchant(
    db: AsyncSession, merchant_id: int, status: Optional[InvoiceStatus] = None
) -> List[Invoice]:
    await get_merchant(db, merchant_id)
    stmt = select(Invoice).where(Invoice.merchant_id == merchant_id)
    if status:
        stmt = stmt.where(Invoice.status == status)
    res = await db.execute(stmt.order_by(Invoice.id))
    return res.scalars().all()


async def get_invoice_total(db: AsyncSession, merchant_id: int, invoice_id: int) -> InvoiceTotalOut:
    """
    Merchant share of an invoice, before and after its coupon. The invoice may
    hold items from other merchants; only ``merchant_id``'s lines count.
    """
    await get_merchant(db, merchant_id)
    res = await db.execute(
        select(Invoice)
        .options(
            selectinload(Invoice.invoice_items).selectinload(InvoiceItem.item),
            selectinload(Invoice.coupon),
        )
        .where(Invoice.id == invoice_id)
    )
    invoice = res.scalar_one_or_none()
    if not invoice:
        raise HTTPException(status_code=404, detail=not_found_detail("Invoice", invoice_id))

    subtotal = subtotal_for_merchant(
        [(line.item, line.quantity) for line in invoice.invoice_items], merchant_id
    )
    total = total_for_merchant(invoice, merchant_id)
    logger.debug("Invoice %s merchant %s: subtotal=%s total=%s", invoice.id, merchant_id, subtotal, total)

    return InvoiceTotalOut(
        invoice_id=invoice.id,
        merchant_id=merchant_id,
        coupon_id=invoice.coupon_id,
        subtotal=subtotal,
        total=total,
    )
