from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.services.invoice_calculator import apply_discount, subtotal_for_merchant, total_for_merchant

M = 1
OTHER = 2


def coupon(discount_type, value, merchant_id=M):
    return SimpleNamespace(merchant_id=merchant_id, discount_type=discount_type, discount_value=Decimal(str(value)))


def item(price, merchant_id=M):
    return SimpleNamespace(merchant_id=merchant_id, unit_price=Decimal(str(price)))


# --------------------------
# subtotal_for_merchant
# --------------------------
def test_subtotal_sums_quantity_times_price():
    assert subtotal_for_merchant([(item(100), 2), (item(50), 3)], M) == Decimal("350")


def test_subtotal_skips_other_merchants_items():
    assert subtotal_for_merchant([(item(100), 2), (item(50, OTHER), 3)], M) == Decimal("200")


def test_subtotal_treats_missing_items_as_zero():
    assert subtotal_for_merchant([(None, 4), (item(10), 1)], M) == Decimal("10")


def test_subtotal_of_zero_quantity_is_zero():
    assert subtotal_for_merchant([(item(100), 0)], M) == Decimal("0")


def test_subtotal_of_empty_invoice_is_zero():
    assert subtotal_for_merchant([], M) == Decimal("0")


# --------------------------
# apply_discount
# --------------------------
def test_dollar_coupon_larger_than_total_clamps_to_zero():
    assert apply_discount(Decimal("100"), coupon("dollar", 150), M) == Decimal("0")


def test_dollar_coupon_equal_to_total_is_zero():
    assert apply_discount(Decimal("150"), coupon("dollar", 150), M) == Decimal("0")


def test_dollar_coupon_partial():
    assert apply_discount(Decimal("150"), coupon("dollar", 30), M) == Decimal("120")


def test_percent_coupon():
    assert apply_discount(Decimal("150"), coupon("percent", 20), M) == Decimal("120")


def test_percent_coupon_rounds_half_even_to_cents():
    # 0.125 -> 0.12, 0.375 -> 0.38
    assert apply_discount(Decimal("0.25"), coupon("percent", 50), M) == Decimal("0.12")
    assert apply_discount(Decimal("0.75"), coupon("percent", 50), M) == Decimal("0.38")


def test_percent_over_hundred_clamps_to_zero():
    assert apply_discount(Decimal("100"), coupon("percent", 150), M) == Decimal("0")


@pytest.mark.parametrize("subtotal", [Decimal("0.01"), Decimal("42"), Decimal("9999.99")])
def test_foreign_coupon_leaves_subtotal_unchanged(subtotal):
    assert apply_discount(subtotal, coupon("dollar", 5, merchant_id=OTHER), M) == subtotal


def test_no_coupon_leaves_subtotal_unchanged():
    assert apply_discount(Decimal("42.50"), None, M) == Decimal("42.50")


@pytest.mark.parametrize("subtotal", [0, -10])
def test_non_positive_subtotal_is_zero(subtotal):
    assert apply_discount(subtotal, coupon("dollar", 20), M) == Decimal("0")
    assert apply_discount(subtotal, None, M) == Decimal("0")


def test_result_is_decimal():
    assert isinstance(apply_discount(Decimal("10"), coupon("percent", 10), M), Decimal)


# --------------------------
# total_for_merchant
# --------------------------
def invoice(lines, applied=None):
    return SimpleNamespace(
        invoice_items=[SimpleNamespace(item=i, quantity=q) for i, q in lines],
        coupon=applied,
    )


def test_total_without_coupon():
    assert total_for_merchant(invoice([(item(100), 1), (item(50), 1)]), M) == Decimal("150")


def test_total_with_dollar_coupon():
    inv = invoice([(item(100), 2), (item(50), 3)], coupon("dollar", 20))
    assert total_for_merchant(inv, M) == Decimal("330")


def test_total_only_discounts_coupon_owner_share():
    inv = invoice([(item(100), 1), (item(80, OTHER), 1)], coupon("percent", 50))
    assert total_for_merchant(inv, M) == Decimal("50")
    assert total_for_merchant(inv, OTHER) == Decimal("80")
