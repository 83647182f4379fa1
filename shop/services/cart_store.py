import logging
import threading
from typing import Callable, Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from ..models.cart_line import CartLine
from ..models.cart_snapshot import CartSnapshot
from ..models.product import ProductRecord
from .cart_storage import CartStorage
from .logging import log_event

logger = logging.getLogger(__name__)

Subscriber = Callable[[CartSnapshot], None]


def _clamp(quantity: int, ceiling: int) -> int:
    return max(1, min(int(quantity), int(ceiling)))


def _normalize(lines: Iterable[CartLine]) -> List[CartLine]:
    """Drop duplicate product ids and unsellable lines, clamp quantities."""
    seen: Dict[str, CartLine] = {}
    for line in lines:
        if line.product_id in seen or line.stock_ceiling < 1:
            continue
        seen[line.product_id] = line.with_quantity(_clamp(line.quantity, line.stock_ceiling))
    return list(seen.values())


class CartStore:
    """Owns the cart lines of one browser session.

    The in-memory lines are the source of truth for the store's lifetime.
    Every mutation that changes them is followed by a best-effort write to
    the session slot and a notification to subscribers. Invalid quantities
    are clamped or ignored, never raised.
    """

    def __init__(self, session_id: str, storage: CartStorage):
        self.session_id = session_id
        self._storage = storage
        self._lock = threading.RLock()
        self._subscribers: List[Subscriber] = []
        self._lines: List[CartLine] = _normalize(self._rehydrate())

    def _rehydrate(self) -> List[CartLine]:
        try:
            return self._storage.load(self.session_id)
        except (SQLAlchemyError, KeyError, TypeError, ValueError):
            logger.exception("Could not restore cart for session %s", self.session_id)
            log_event("warning", "cart.restore_failed", session_id=self.session_id)
            return []

    # --- reads ---

    def get_snapshot(self) -> CartSnapshot:
        with self._lock:
            return CartSnapshot(lines=tuple(self._lines))

    def is_empty(self) -> bool:
        with self._lock:
            return not self._lines

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` for snapshot updates; returns an unsubscribe function."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    # --- mutations ---

    def add_line(self, product: ProductRecord, requested_qty: int = 1) -> CartSnapshot:
        with self._lock:
            if requested_qty < 1:
                return self.get_snapshot()
            ceiling = max(int(product.stock or 0), 0)
            idx = self._index(product.id)
            if ceiling == 0:
                log_event("info", "cart.stock_exceeded_noop", product_id=product.id, stock=ceiling)
                return self.get_snapshot()
            if idx is None:
                quantity = min(requested_qty, ceiling)
                self._lines.append(self._line_from_product(product, quantity))
                log_event("info", "cart.line_added", product_id=product.id, quantity=quantity)
            else:
                existing = self._lines[idx]
                wanted = existing.quantity + requested_qty
                quantity = min(wanted, ceiling)
                if wanted > ceiling:
                    log_event("info", "cart.stock_exceeded_noop", product_id=product.id, stock=ceiling)
                refreshed = self._line_from_product(product, quantity)
                if refreshed == existing:
                    return self.get_snapshot()
                self._lines[idx] = refreshed
                log_event("info", "cart.line_incremented", product_id=product.id, quantity=quantity)
            return self._commit()

    def remove_line(self, product_id: str) -> CartSnapshot:
        with self._lock:
            idx = self._index(product_id)
            if idx is None:
                return self.get_snapshot()
            del self._lines[idx]
            log_event("info", "cart.line_removed", product_id=product_id)
            return self._commit()

    def set_quantity(self, product_id: str, qty: int) -> CartSnapshot:
        # zero or negative clamps to 1; removal only happens through remove_line
        with self._lock:
            idx = self._index(product_id)
            if idx is None:
                return self.get_snapshot()
            line = self._lines[idx]
            quantity = _clamp(qty, line.stock_ceiling)
            if quantity != qty:
                log_event("info", "cart.quantity_clamped", product_id=product_id, requested=qty, quantity=quantity)
            if quantity == line.quantity:
                return self.get_snapshot()
            self._lines[idx] = line.with_quantity(quantity)
            return self._commit()

    def replace_lines(self, lines: Iterable[CartLine]) -> CartSnapshot:
        """Swap the whole cart for ``lines``; used when a server cart is adopted."""
        with self._lock:
            self._lines = _normalize(lines)
            return self._commit()

    def clear(self) -> CartSnapshot:
        with self._lock:
            self._lines = []
            try:
                self._storage.erase(self.session_id)
            except SQLAlchemyError:
                logger.exception("Could not erase persisted cart for session %s", self.session_id)
                log_event("error", "cart.persist_failed", session_id=self.session_id, op="erase")
            log_event("info", "cart.cleared", session_id=self.session_id)
            snapshot = self.get_snapshot()
            self._notify(snapshot)
            return snapshot

    # --- internals ---

    def _index(self, product_id: str) -> Optional[int]:
        for idx, line in enumerate(self._lines):
            if line.product_id == product_id:
                return idx
        return None

    @staticmethod
    def _line_from_product(product: ProductRecord, quantity: int) -> CartLine:
        return CartLine(
            product_id=product.id,
            name=product.name,
            image_ref=product.image_ref,
            unit_base_price=product.base_price,
            unit_discount_price=product.discount_price,
            quantity=quantity,
            stock_ceiling=max(int(product.stock or 0), 0),
            sku=product.sku,
            category=product.category,
        )

    def _commit(self) -> CartSnapshot:
        snapshot = self.get_snapshot()
        self._persist(snapshot)
        self._notify(snapshot)
        return snapshot

    def _persist(self, snapshot: CartSnapshot) -> None:
        try:
            self._storage.save(self.session_id, list(snapshot.lines))
        except SQLAlchemyError:
            # memory stays authoritative; the next successful write catches up
            logger.exception("Could not persist cart for session %s", self.session_id)
            log_event("error", "cart.persist_failed", session_id=self.session_id, op="save")

    def _notify(self, snapshot: CartSnapshot) -> None:
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception:
                logger.exception("Cart subscriber %r failed", callback)
