# app/services/invoice_calculator.py
"""
Merchant-scoped invoice totals.

Money is Decimal throughout and every returned amount is rounded to the cent
with ROUND_HALF_EVEN. Nothing here touches the database: callers pass in
loaded items, quantities and coupons.
"""
from decimal import Decimal
from typing import Iterable, Tuple

from app.models.coupon_models import DiscountType
from app.utils.decimal_utils import ZERO, quantize_money, to_decimal

HUNDRED = Decimal("100")


def subtotal_for_merchant(invoice_items: Iterable[Tuple[object, int]], merchant_id: int) -> Decimal:
    """
    Sum ``quantity * unit_price`` over the (item, quantity) pairs owned by
    ``merchant_id``. Unresolvable items (None) contribute 0.
    """
    total = ZERO
    for item, quantity in invoice_items:
        if item is None or item.merchant_id != merchant_id:
            continue
        total += (quantity or 0) * to_decimal(item.unit_price)
    return quantize_money(max(total, ZERO))


def apply_discount(subtotal, coupon, merchant_id: int) -> Decimal:
    """
    Apply ``coupon`` to ``subtotal`` for ``merchant_id``.

    Not idempotent: pass the undiscounted subtotal, never an amount that
    already had this coupon applied.
    """
    subtotal = to_decimal(subtotal)
    if subtotal <= 0:
        return ZERO
    if coupon is None or coupon.merchant_id != merchant_id:
        return quantize_money(subtotal)

    value = to_decimal(coupon.discount_value)
    discount_type = DiscountType(coupon.discount_type)

    if discount_type == DiscountType.DOLLAR:
        if value >= subtotal:
            return ZERO
        return quantize_money(subtotal - value)

    # percent; anything over 100% clamps to zero instead of going negative
    total = subtotal * (1 - value / HUNDRED)
    return quantize_money(max(total, ZERO))


def total_for_merchant(invoice, merchant_id: int) -> Decimal:
    """Subtotal of the lines owned by ``merchant_id`` with the invoice's coupon applied."""
    pairs = [(line.item, line.quantity) for line in invoice.invoice_items]
    subtotal = subtotal_for_merchant(pairs, merchant_id)
    return apply_discount(subtotal, invoice.coupon, merchant_id)
