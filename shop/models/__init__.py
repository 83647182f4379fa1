from .cart_line import CartLine
from .cart_slot import CartSlot
from .cart_snapshot import CartSnapshot
from .checkout_order import CheckoutOrder, CheckoutQuote, OrderLine, ShippingAddress
from .product import ProductRecord

__all__ = [
    "CartLine",
    "CartSlot",
    "CartSnapshot",
    "CheckoutOrder",
    "CheckoutQuote",
    "OrderLine",
    "ProductRecord",
    "ShippingAddress",
]
