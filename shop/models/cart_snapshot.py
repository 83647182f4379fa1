from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Tuple

from .cart_line import CartLine


@dataclass(frozen=True)
class CartSnapshot:
    """Immutable view of the cart in display order."""

    lines: Tuple[CartLine, ...] = ()

    @property
    def subtotal(self) -> Decimal:
        return sum((line.line_total for line in self.lines), Decimal("0.00"))

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lines": [line.to_dict() for line in self.lines],
            "subtotal": float(self.subtotal),
            "item_count": self.item_count,
        }
