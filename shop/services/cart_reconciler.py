from typing import Iterable

from ..errors import TransportError
from ..models.cart_line import CartLine
from .backend_client import BackendClient
from .cart_store import CartStore
from .logging import log_event


class CartReconciler:
    """Adopts the server cart only while the local cart is empty.

    A non-empty local cart may hold edits that have not reached the server
    yet, so a server cart never overwrites it. This is not a per-line merge:
    a server cart fetched while local lines appear is dropped for this cycle.
    """

    def __init__(self, store: CartStore, backend: BackendClient):
        self._store = store
        self._backend = backend

    def reconcile(self) -> bool:
        """Fetch the server cart and merge it. Returns True if the local cart was replaced.

        Anonymous sessions have no server cart and never fetch. Raises
        TransportError when the fetch fails; the local cart is left as is.
        """
        if not self._backend.access_token or not self._store.is_empty():
            return False
        try:
            server_lines = self._backend.fetch_cart()
        except TransportError as exc:
            log_event("warning", "cart.reconcile_failed", session_id=self._store.session_id, error=str(exc))
            raise
        return self.merge(server_lines)

    def merge(self, server_lines: Iterable[CartLine]) -> bool:
        lines = list(server_lines)
        # re-checked after the fetch: local adds may have landed meanwhile
        if not self._store.is_empty():
            log_event("info", "cart.reconcile_skipped", session_id=self._store.session_id, server_lines=len(lines))
            return False
        if not lines:
            return False
        self._store.replace_lines(lines)
        log_event("info", "cart.reconciled", session_id=self._store.session_id, lines=len(lines))
        return True
