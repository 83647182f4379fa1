"""Price resolution shared by the cart, the checkout summary and the order payload.

Every place that shows or submits a price for a cart line goes through
``resolve_price`` so the three can never disagree.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Union

Number = Union[int, float, str, Decimal]

CENTS = Decimal("0.01")


def to_money(value: Number, field: str = "price") -> Decimal:
    """Coerce a numeric value into a two-place Decimal (>= 0)."""
    if isinstance(value, bool):
        raise ValueError(f"{field} must be numeric")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValueError(f"{field} must be numeric") from None
    if not amount.is_finite() or amount < 0:
        raise ValueError(f"{field} must be >= 0")
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def to_optional_money(value: Optional[Number], field: str = "discount_price") -> Optional[Decimal]:
    if value is None or value == "":
        return None
    return to_money(value, field)


@dataclass(frozen=True)
class ResolvedPrice:
    final_unit_price: Decimal
    line_total: Decimal


def final_unit_price(base_price: Number, discount_price: Optional[Number]) -> Decimal:
    base = to_money(base_price, "base_price")
    discount = to_optional_money(discount_price)
    # equal discount counts as no discount
    if discount is not None and discount < base:
        return discount
    return base


def has_discount(base_price: Number, discount_price: Optional[Number]) -> bool:
    return final_unit_price(base_price, discount_price) < to_money(base_price, "base_price")


def resolve_price(base_price: Number, discount_price: Optional[Number], quantity: int) -> ResolvedPrice:
    if isinstance(quantity, bool) or int(quantity) != quantity or quantity < 1:
        raise ValueError("quantity must be an integer >= 1")
    unit = final_unit_price(base_price, discount_price)
    return ResolvedPrice(final_unit_price=unit, line_total=unit * int(quantity))
