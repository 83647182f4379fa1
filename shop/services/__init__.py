"""Cart, reconciliation and checkout services."""

from .backend_client import BackendClient
from .cart_reconciler import CartReconciler
from .cart_sessions import CartSession, CartSessions
from .cart_storage import CartStorage
from .cart_store import CartStore
from .cart_sync import CartSync
from .checkout import CheckoutAssembler, CheckoutState

__all__ = [
    "BackendClient",
    "CartReconciler",
    "CartSession",
    "CartSessions",
    "CartStorage",
    "CartStore",
    "CartSync",
    "CheckoutAssembler",
    "CheckoutState",
]
