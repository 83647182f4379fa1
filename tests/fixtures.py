"""Test data builders."""

from decimal import Decimal

from shop.models.cart_line import CartLine
from shop.models.product import ProductRecord


def make_product(pid="p1", base="100", discount="80", stock=5, name=None) -> ProductRecord:
    return ProductRecord(
        id=pid,
        name=name or f"Product {pid}",
        base_price=Decimal(base),
        discount_price=None if discount is None else Decimal(discount),
        stock=stock,
        image_ref=f"/media/{pid}.jpg",
    )


def make_line(pid="p1", base="100", discount=None, quantity=1, stock=5) -> CartLine:
    return CartLine(
        product_id=pid,
        name=f"Product {pid}",
        unit_base_price=Decimal(base),
        unit_discount_price=None if discount is None else Decimal(discount),
        quantity=quantity,
        stock_ceiling=stock,
    )


SHIPPING_FORM = {
    "full_name": "Mariam Haddad",
    "phone_number": "+971500000000",
    "email": "mariam@example.com",
    "street_address": "12 Harbour Road",
    "city": "Dubai",
    "state": "Dubai",
    "postal_code": "00000",
    "payment_method": "COD",
}
