import logging
import threading
from typing import Optional

from ..errors import TransportError
from ..models.cart_snapshot import CartSnapshot
from .backend_client import BackendClient
from .cart_store import CartStore
from .logging import log_event

logger = logging.getLogger(__name__)


class CartSync:
    """Pushes the local cart to the server cart, at most once per flush."""

    def __init__(self, store: CartStore, backend: BackendClient):
        self._store = store
        self._backend = backend
        self._lock = threading.Lock()
        self._pending: Optional[CartSnapshot] = None
        self._unsubscribe = store.subscribe(self._on_snapshot)

    def _on_snapshot(self, snapshot: CartSnapshot) -> None:
        with self._lock:
            self._pending = snapshot

    @property
    def dirty(self) -> bool:
        return self._pending is not None

    def flush(self) -> bool:
        """Send the latest pending snapshot. Failures are logged and dropped."""
        with self._lock:
            snapshot, self._pending = self._pending, None
        if snapshot is None:
            return False
        if not self._backend.access_token:
            # anonymous carts live only in the session slot
            return False
        items = [{"product": line.product_id, "quantity": line.quantity} for line in snapshot.lines]
        try:
            self._backend.sync_cart(items)
        except TransportError as exc:
            logger.warning("Cart sync failed for session %s: %s", self._store.session_id, exc)
            log_event("warning", "cart.sync_failed", session_id=self._store.session_id, error=str(exc))
            return False
        log_event("info", "cart.synced", session_id=self._store.session_id, lines=len(items))
        return True

    def close(self) -> None:
        self._unsubscribe()
