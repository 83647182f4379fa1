from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any, Dict, Optional

from ..pricing import has_discount, resolve_price, to_money, to_optional_money


@dataclass(frozen=True)
class CartLine:
    """One product in the cart with its price snapshot and stock ceiling."""

    product_id: str
    name: str
    unit_base_price: Decimal
    unit_discount_price: Optional[Decimal]
    quantity: int
    stock_ceiling: int
    image_ref: Optional[str] = None
    sku: Optional[str] = None
    category: Optional[str] = None

    @property
    def unit_final_price(self) -> Decimal:
        return resolve_price(self.unit_base_price, self.unit_discount_price, 1).final_unit_price

    @property
    def line_total(self) -> Decimal:
        return resolve_price(self.unit_base_price, self.unit_discount_price, self.quantity).line_total

    def with_quantity(self, quantity: int) -> "CartLine":
        return replace(self, quantity=quantity)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "image_ref": self.image_ref,
            "unit_base_price": str(self.unit_base_price),
            "unit_discount_price": None if self.unit_discount_price is None else str(self.unit_discount_price),
            "unit_final_price": str(self.unit_final_price),
            "has_discount": has_discount(self.unit_base_price, self.unit_discount_price),
            "quantity": self.quantity,
            "stock_ceiling": self.stock_ceiling,
            "sku": self.sku,
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CartLine":
        # unit_final_price and has_discount are derived, never read back
        return cls(
            product_id=str(data["product_id"]),
            name=data.get("name") or f"Product #{data['product_id']}",
            image_ref=data.get("image_ref"),
            unit_base_price=to_money(data.get("unit_base_price") or 0, "unit_base_price"),
            unit_discount_price=to_optional_money(data.get("unit_discount_price")),
            quantity=int(data.get("quantity") or 1),
            stock_ceiling=max(int(data.get("stock_ceiling") or 0), 0),
            sku=data.get("sku"),
            category=data.get("category"),
        )
