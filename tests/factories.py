from decimal import Decimal

from app.models import Coupon, Customer, Invoice, InvoiceItem, Item, Merchant, DiscountType, InvoiceStatus


async def make_merchant(db, name="Sample Merchant"):
    merchant = Merchant(name=name)
    db.add(merchant)
    await db.commit()
    return merchant


async def make_customer(db, first_name="Mel", last_name="Rose"):
    customer = Customer(first_name=first_name, last_name=last_name)
    db.add(customer)
    await db.commit()
    return customer


async def make_coupon(db, merchant, code, active=True, discount_type="percent", discount_value=10, name=None):
    coupon = Coupon(
        merchant_id=merchant.id,
        name=name or f"Coupon {code}",
        code=code,
        discount_type=DiscountType(discount_type),
        discount_value=Decimal(str(discount_value)),
        active=active,
    )
    db.add(coupon)
    await db.commit()
    return coupon


async def make_item(db, merchant, unit_price, name="Item"):
    item = Item(name=name, description=f"Description for {name}", unit_price=Decimal(str(unit_price)), merchant_id=merchant.id)
    db.add(item)
    await db.commit()
    return item


async def make_invoice(db, merchant, customer, coupon=None, status="shipped", lines=()):
    invoice = Invoice(
        merchant_id=merchant.id,
        customer_id=customer.id,
        coupon_id=coupon.id if coupon else None,
        status=InvoiceStatus(status),
    )
    db.add(invoice)
    await db.flush()
    for item, quantity in lines:
        db.add(InvoiceItem(invoice_id=invoice.id, item_id=item.id if item else None, quantity=quantity))
    await db.commit()
    return invoice
