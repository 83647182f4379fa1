from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class ProductRecord:
    """Catalog record used to seed or refresh a cart line."""

    id: str
    name: str
    base_price: Decimal
    discount_price: Optional[Decimal]
    stock: int
    image_ref: Optional[str] = None
    sku: Optional[str] = None
    category: Optional[str] = None
