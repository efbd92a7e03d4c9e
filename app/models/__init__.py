# app/models/__init__.py
from app.models.merchant_models import Merchant
from app.models.customer_models import Customer
from app.models.item_models import Item
from app.models.coupon_models import Coupon, DiscountType
from app.models.invoice_models import Invoice, InvoiceItem, Transaction, InvoiceStatus
