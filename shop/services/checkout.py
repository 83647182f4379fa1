import enum
import logging
import threading
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from ..errors import CheckoutInProgressError, EmptyCartError, TransportError
from ..models.cart_snapshot import CartSnapshot
from ..models.checkout_order import PAYMENT_METHODS, CheckoutOrder, CheckoutQuote, OrderLine, ShippingAddress
from ..pricing import Number, to_money
from ..utils.validators import require_text, validate_choice, validate_email
from .backend_client import BackendClient
from .cart_store import CartStore
from .logging import log_event

logger = logging.getLogger(__name__)

# form order; the first missing field is the one reported
SHIPPING_FIELDS = (
    "full_name",
    "phone_number",
    "email",
    "street_address",
    "city",
    "state",
    "postal_code",
)


class CheckoutState(str, enum.Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"


class CheckoutAssembler:
    """Turns a cart snapshot and shipping form into a submitted order.

    Idle -> Submitting -> Success (cart cleared) or back to Idle on failure
    with the cart untouched. Nothing is retried automatically.
    """

    def __init__(
        self,
        store: CartStore,
        backend: BackendClient,
        *,
        free_shipping_threshold: Number = 500,
        standard_shipping_fee: Number = 50,
    ) -> None:
        self._store = store
        self._backend = backend
        self.free_shipping_threshold = to_money(free_shipping_threshold, "free_shipping_threshold")
        self.standard_shipping_fee = to_money(standard_shipping_fee, "standard_shipping_fee")
        self._lock = threading.Lock()
        self.state = CheckoutState.IDLE
        self.last_error: Optional[TransportError] = None

    def use_backend(self, backend: BackendClient) -> None:
        """Submit future orders through ``backend`` (e.g. after the user signs in)."""
        self._backend = backend

    def shipping_cost(self, subtotal: Decimal) -> Decimal:
        if subtotal > self.free_shipping_threshold:
            return Decimal("0.00")
        return self.standard_shipping_fee

    def quote(self, snapshot: CartSnapshot) -> CheckoutQuote:
        subtotal = snapshot.subtotal
        shipping = self.shipping_cost(subtotal)
        return CheckoutQuote(subtotal=subtotal, shipping_cost=shipping, total=subtotal + shipping)

    def build_order(self, snapshot: CartSnapshot, shipping_form: Mapping[str, Any]) -> CheckoutOrder:
        """Validate locally and pin the cart into an order. No network calls."""
        if snapshot.is_empty:
            raise EmptyCartError()
        values = {name: require_text(shipping_form, name) for name in SHIPPING_FIELDS}
        validate_email(values["email"])
        payment_method = validate_choice(shipping_form.get("payment_method"), "payment_method", PAYMENT_METHODS, "COD")
        lines = tuple(
            OrderLine(product_id=line.product_id, quantity=line.quantity, unit_price=line.unit_final_price)
            for line in snapshot.lines
        )
        return CheckoutOrder(
            lines=lines,
            shipping_address=ShippingAddress(**values),
            payment_method=payment_method,
            quote=self.quote(snapshot),
        )

    def submit(self, order: CheckoutOrder) -> Dict[str, Any]:
        with self._lock:
            if self.state is CheckoutState.SUBMITTING:
                raise CheckoutInProgressError()
            self.state = CheckoutState.SUBMITTING
            self.last_error = None
        session_id = self._store.session_id
        placed = False
        try:
            response = self._backend.create_order(order.to_payload())
            placed = True
        except TransportError as exc:
            self.last_error = exc
            logger.warning("Order submission failed for session %s: %s", session_id, exc)
            log_event("error", "checkout.failed", session_id=session_id, error=str(exc), total=order.total)
            raise
        finally:
            with self._lock:
                self.state = CheckoutState.SUCCESS if placed else CheckoutState.IDLE
        self._store.clear()
        log_event(
            "info",
            "checkout.submitted",
            session_id=session_id,
            order_id=response.get("id"),
            lines=len(order.lines),
            total=order.total,
        )
        return response

    def checkout(self, shipping_form: Mapping[str, Any]) -> Dict[str, Any]:
        order = self.build_order(self._store.get_snapshot(), shipping_form)
        return self.submit(order)
