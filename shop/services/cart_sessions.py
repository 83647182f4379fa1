import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Optional

from ..pricing import Number
from .backend_client import BackendClient
from .cart_reconciler import CartReconciler
from .cart_storage import CartStorage
from .cart_store import CartStore
from .cart_sync import CartSync
from .checkout import CheckoutAssembler, CheckoutState
from .logging import log_event


@dataclass
class CartSession:
    """Everything wired around one session's cart store."""

    store: CartStore
    reconciler: CartReconciler
    sync: CartSync
    checkout: CheckoutAssembler
    access_token: Optional[str] = None
    last_seen: float = 0.0


class CartSessions:
    """Builds one CartSession per browser session and tears it down on session end.

    Sessions idle longer than ``idle_ttl_seconds``, or beyond ``max_sessions``
    (least recently used first), are evicted from memory. Eviction keeps the
    persisted slot, so the next request for that session rehydrates its cart.
    """

    def __init__(
        self,
        storage: CartStorage,
        backend: BackendClient,
        *,
        free_shipping_threshold: Number = 500,
        standard_shipping_fee: Number = 50,
        max_sessions: int = 1000,
        idle_ttl_seconds: float = 1800,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._storage = storage
        self._backend = backend
        self._free_shipping_threshold = free_shipping_threshold
        self._standard_shipping_fee = standard_shipping_fee
        self._max_sessions = max(int(max_sessions), 1)
        self._idle_ttl = idle_ttl_seconds
        self._clock = clock
        self._sessions: "OrderedDict[str, CartSession]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def get(self, session_id: str, access_token: Optional[str] = None) -> CartSession:
        """Return the session's cart, bound to ``access_token`` for server-cart calls."""
        token = (access_token or "").strip() or None
        with self._lock:
            now = self._clock()
            cart_session = self._sessions.get(session_id)
            if cart_session is None:
                cart_session = self._open(session_id, token)
                self._sessions[session_id] = cart_session
            else:
                self._sessions.move_to_end(session_id)
                if cart_session.access_token != token:
                    self._bind(cart_session, token)
            cart_session.last_seen = now
            self._evict(now)
            return cart_session

    def lookup(self, session_id: str) -> Optional[CartSession]:
        """The live session, if any, without touching its token or recency."""
        with self._lock:
            return self._sessions.get(session_id)

    def active(self, session_id: str) -> bool:
        return self.lookup(session_id) is not None

    def end_session(self, session_id: str) -> None:
        """Drop the session's cart and its persisted slot (logout / session end)."""
        with self._lock:
            cart_session = self._sessions.pop(session_id, None)
        if cart_session is None:
            CartStore(session_id, self._storage).clear()
        else:
            cart_session.sync.close()
            cart_session.store.clear()
        log_event("info", "cart.session_ended", session_id=session_id)

    # --- internals ---

    def _open(self, session_id: str, token: Optional[str]) -> CartSession:
        store = CartStore(session_id, self._storage)
        backend = self._backend.with_token(token)
        cart_session = CartSession(
            store=store,
            reconciler=CartReconciler(store, backend),
            sync=CartSync(store, backend),
            checkout=CheckoutAssembler(
                store,
                backend,
                free_shipping_threshold=self._free_shipping_threshold,
                standard_shipping_fee=self._standard_shipping_fee,
            ),
            access_token=token,
        )
        log_event(
            "info",
            "cart.session_opened",
            session_id=session_id,
            lines=len(store.get_snapshot().lines),
            authenticated=token is not None,
        )
        return cart_session

    def _bind(self, cart_session: CartSession, token: Optional[str]) -> None:
        backend = self._backend.with_token(token)
        cart_session.sync.close()
        cart_session.sync = CartSync(cart_session.store, backend)
        cart_session.reconciler = CartReconciler(cart_session.store, backend)
        cart_session.checkout.use_backend(backend)
        cart_session.access_token = token
        log_event("info", "cart.session_rebound", session_id=cart_session.store.session_id, authenticated=token is not None)

    def _evict(self, now: float) -> None:
        # newest entry is the one just requested; never evict it
        for session_id in list(self._sessions)[:-1]:
            cart_session = self._sessions[session_id]
            idle = now - cart_session.last_seen > self._idle_ttl
            over = len(self._sessions) > self._max_sessions
            if not (idle or over):
                continue
            if cart_session.checkout.state is CheckoutState.SUBMITTING:
                continue
            del self._sessions[session_id]
            cart_session.sync.close()
            log_event("info", "cart.session_evicted", session_id=session_id, idle=idle)
