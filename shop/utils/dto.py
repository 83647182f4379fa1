from typing import Any, Dict, List, Optional

from ..models.cart_line import CartLine
from ..models.product import ProductRecord
from ..pricing import to_money, to_optional_money

# backend omits stock on some cart payloads
DEFAULT_STOCK = 999


def _feature_image(details: Dict[str, Any]) -> Optional[str]:
    for img in details.get("images") or []:
        if isinstance(img, dict) and img.get("is_feature"):
            return img.get("image")
    return details.get("image")


def to_product_record(dto: Dict[str, Any]) -> ProductRecord:
    """Map a catalog product payload onto a ProductRecord."""
    pid = dto.get("id")
    if pid is None:
        raise ValueError("product id required")
    stock = dto.get("stock")
    return ProductRecord(
        id=str(pid),
        name=dto.get("name") or f"Product #{pid}",
        base_price=to_money(dto.get("price") or 0, "price"),
        discount_price=to_optional_money(dto.get("discount_price")),
        stock=DEFAULT_STOCK if stock is None else max(int(stock), 0),
        image_ref=_feature_image(dto),
        sku=dto.get("sku") or None,
        category=dto.get("category_name") or dto.get("category") or None,
    )


def to_cart_line(item: Dict[str, Any]) -> CartLine:
    """Map one server cart item (``product`` + ``product_details``) onto a CartLine."""
    details = dict(item.get("product_details") or {})
    details.setdefault("id", item.get("product"))
    product = to_product_record(details)
    return CartLine(
        product_id=product.id,
        name=product.name,
        image_ref=product.image_ref,
        unit_base_price=product.base_price,
        unit_discount_price=product.discount_price,
        quantity=int(item.get("quantity") or 1),
        stock_ceiling=product.stock,
        sku=product.sku,
        category=product.category,
    )


def to_cart_lines(cart: Dict[str, Any]) -> List[CartLine]:
    items = cart.get("items") if isinstance(cart, dict) else None
    if not isinstance(items, list):
        return []
    return [to_cart_line(it) for it in items]
