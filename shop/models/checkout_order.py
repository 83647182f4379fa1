from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Tuple


PAYMENT_METHODS = ("COD", "ONLINE")


@dataclass(frozen=True)
class ShippingAddress:
    full_name: str
    phone_number: str
    email: str
    street_address: str
    city: str
    state: str
    postal_code: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "full_name": self.full_name,
            "phone_number": self.phone_number,
            "street_address": self.street_address,
            "city": self.city,
            "state": self.state,
            "postal_code": self.postal_code,
            "email": self.email,
        }


@dataclass(frozen=True)
class OrderLine:
    """Line item pinned at submit time; later cart edits do not reach it."""

    product_id: str
    quantity: int
    unit_price: Decimal

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class CheckoutQuote:
    subtotal: Decimal
    shipping_cost: Decimal
    total: Decimal

    def to_dict(self) -> Dict[str, float]:
        return {
            "subtotal": float(self.subtotal),
            "shipping_cost": float(self.shipping_cost),
            "total": float(self.total),
        }


@dataclass(frozen=True)
class CheckoutOrder:
    lines: Tuple[OrderLine, ...]
    shipping_address: ShippingAddress
    payment_method: str
    quote: CheckoutQuote

    @property
    def subtotal(self) -> Decimal:
        return self.quote.subtotal

    @property
    def shipping_cost(self) -> Decimal:
        return self.quote.shipping_cost

    @property
    def total(self) -> Decimal:
        return self.quote.total

    def to_payload(self) -> Dict[str, Any]:
        """Body for the order submission endpoint."""
        return {
            "items": [
                {
                    "product_id": line.product_id,
                    "quantity": line.quantity,
                    "price": float(line.unit_price),
                }
                for line in self.lines
            ],
            "shipping_address": self.shipping_address.to_dict(),
            "payment_method": self.payment_method,
            "total_amount": float(self.total),
        }
