from fastapi import APIRouter

from .coupons import router as coupons_router
from .invoices import router as invoices_router

router = APIRouter(prefix="/api/v1/merchants")

router.include_router(coupons_router)
router.include_router(invoices_router)
