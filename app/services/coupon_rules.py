# app/services/coupon_rules.py
"""
Coupon eligibility rules.

Pure decision logic: every function here works only on the values handed to
it. Counting active coupons, looking up codes and checking for pending
invoices is the caller's job (see ``app.services.coupon_queries``), and the
caller must do it inside the same transaction that writes the coupon.
"""
from typing import Any, Iterable, Mapping

from app.models.coupon_models import DiscountType
from app.utils.decimal_utils import to_decimal

MAX_ACTIVE_COUPONS = 5
MAX_PERCENT = 100

DISCOUNT_TYPES = {t.value for t in DiscountType}
REQUIRED_FIELDS = ("name", "code", "discount_value", "discount_type", "active")


# -----------------------
# Errors
# -----------------------
class CouponRuleError(ValueError):
    """Base class for coupon validation rejections."""


class InvalidFieldError(CouponRuleError):
    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field} {message}")


class DuplicateCodeError(CouponRuleError):
    def __init__(self, code: str):
        self.code = code
        super().__init__("code has already been taken")


class ActiveLimitExceededError(CouponRuleError):
    def __init__(self, limit: int = MAX_ACTIVE_COUPONS):
        self.limit = limit
        super().__init__(f"This Merchant already has {limit} active coupons.")


class PendingInvoiceBlocksDeactivationError(CouponRuleError):
    def __init__(self):
        super().__init__("Cannot deactivate coupon with pending invoices.")


# -----------------------
# Field checks
# -----------------------
def _discount_type_value(value) -> str:
    if isinstance(value, DiscountType):
        return value.value
    return value


def _check_text(field: str, value):
    if not isinstance(value, str) or not value.strip():
        raise InvalidFieldError(field, "can't be blank")


def _check_discount_type(value):
    if _discount_type_value(value) not in DISCOUNT_TYPES:
        raise InvalidFieldError("discount_type", "must be one of: dollar, percent")


def _check_active(value):
    if not isinstance(value, bool):
        raise InvalidFieldError("active", "must be true or false")


def _check_discount_value(value, discount_type):
    if value is None:
        raise InvalidFieldError("discount_value", "can't be blank")
    try:
        amount = to_decimal(value)
    except ValueError:
        raise InvalidFieldError("discount_value", "is not a number")
    if amount <= 0:
        raise InvalidFieldError("discount_value", "must be greater than 0")
    if _discount_type_value(discount_type) == DiscountType.PERCENT.value and amount > MAX_PERCENT:
        raise InvalidFieldError("discount_value", f"must be less than or equal to {MAX_PERCENT} for percent coupons")


_TEXT_FIELDS = ("name", "code")


def _check_fields(fields: Mapping[str, Any], discount_type):
    for field in _TEXT_FIELDS:
        if field in fields:
            _check_text(field, fields[field])
    if "discount_type" in fields:
        _check_discount_type(fields["discount_type"])
    if "discount_value" in fields or "discount_type" in fields:
        _check_discount_value(fields.get("discount_value"), discount_type)
    if "active" in fields:
        _check_active(fields["active"])


# -----------------------
# Create / update gates
# -----------------------
def validate_for_create(candidate: Mapping[str, Any], *, active_count: int, code_taken: bool) -> None:
    """
    Raise a CouponRuleError if ``candidate`` may not be created.

    ``active_count`` is the number of active coupons the merchant currently
    owns (the candidate itself excluded) and ``code_taken`` tells whether
    another coupon of the same merchant already uses ``candidate["code"]``.
    """
    for field in REQUIRED_FIELDS:
        if candidate.get(field) is None:
            raise InvalidFieldError(field, "can't be blank")

    _check_fields(candidate, candidate["discount_type"])

    if code_taken:
        raise DuplicateCodeError(candidate["code"])

    if candidate["active"] and active_count >= MAX_ACTIVE_COUPONS:
        raise ActiveLimitExceededError()


def validate_for_update(
    existing,
    changes: Mapping[str, Any],
    pending_invoice_exists: bool,
    *,
    active_count: int = 0,
    code_taken: bool = False,
) -> None:
    """
    Raise a CouponRuleError if ``changes`` may not be applied to ``existing``.

    ``active_count`` counts the merchant's active coupons excluding
    ``existing``, so re-saving an already active coupon is never rejected by
    the cap. ``code_taken`` must likewise exclude the coupon's own record.
    """
    for field in REQUIRED_FIELDS:
        if field in changes and changes[field] is None:
            raise InvalidFieldError(field, "can't be blank")

    discount_type = changes.get("discount_type", existing.discount_type)
    if "discount_type" in changes and "discount_value" not in changes:
        # a type change re-checks the stored value against the new type
        _check_fields({**changes, "discount_value": existing.discount_value}, discount_type)
    else:
        _check_fields(changes, discount_type)

    if "code" in changes and changes["code"] != existing.code and code_taken:
        raise DuplicateCodeError(changes["code"])

    if "active" not in changes:
        return

    if changes["active"] and active_count >= MAX_ACTIVE_COUPONS:
        raise ActiveLimitExceededError()

    if existing.active and not changes["active"] and pending_invoice_exists:
        raise PendingInvoiceBlocksDeactivationError()


# -----------------------
# Applicability
# -----------------------
def is_applicable_to(coupon, items: Iterable) -> bool:
    """True when every item belongs to the coupon's merchant."""
    return all(item.merchant_id == coupon.merchant_id for item in items)
