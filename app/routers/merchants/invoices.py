from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.models.invoice_models import InvoiceStatus
from app.schemas.invoice_schemas import InvoiceOut, InvoiceTotalOut
from app.services import invoice_service

router = APIRouter(prefix="/{merchant_id}/invoices", tags=["Invoices"])


# GET /api/v1/merchants/{merchant_id}/invoices
@router.get("", response_model=List[InvoiceOut])
async def route_invoices_by_merchant(
    merchant_id: int,
    db: AsyncSession = Depends(get_db),
    status: Optional[InvoiceStatus] = Query(None, description="Filter by status"),
):
    return await invoice_service.get_invoices_by_merchant(db, merchant_id, status)


# GET /api/v1/merchants/{merchant_id}/invoices/{invoice_id}/total
@router.get("/{invoice_id}/total", response_model=InvoiceTotalOut)
async def route_invoice_total(merchant_id: int, invoice_id: int, db: AsyncSession = Depends(get_db)):
    return await invoice_service.get_invoice_total(db, merchant_id, invoice_id)
