"""Cart API used by the storefront cart drawer and cart page."""

from __future__ import annotations

from flask import Blueprint, jsonify, request, session

from shop.errors import TransportError

from ._session import SESSION_KEY, TOKEN_KEY, cart_payload, cart_session, components, session_id


cart_bp = Blueprint("storefront_cart", __name__, url_prefix="/api/cart")


def _quantity_arg(payload: dict, default=None):
    raw = payload.get("quantity", default)
    if raw is None or isinstance(raw, bool):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


@cart_bp.after_app_request
def flush_cart_sync(response):
    sid = session_id(create=False)
    cs = components()["cart_sessions"].lookup(sid) if sid else None
    if cs is not None:
        cs.sync.flush()
    return response


@cart_bp.get("")
def view_cart():
    """Cart page load: adopt the server cart if the local one is empty."""
    cs = cart_session()
    try:
        cs.reconciler.reconcile()
    except TransportError as exc:
        body = cart_payload(cs.store.get_snapshot())
        body["error"] = str(exc) or "Failed to load cart"
        return jsonify(body), 502
    return jsonify(cart_payload(cs.store.get_snapshot()))


@cart_bp.post("/items")
def add_item():
    payload = request.get_json(silent=True) or {}
    product_id = str(payload.get("product_id") or "").strip()
    if not product_id:
        return jsonify({"error": "product_id required"}), 400
    quantity = _quantity_arg(payload, default=1)
    if quantity is None:
        return jsonify({"error": "quantity must be an integer"}), 400

    try:
        product = components()["backend"].get_product(product_id)
    except TransportError as exc:
        status = 404 if exc.status_code == 404 else 502
        return jsonify({"error": str(exc)}), status
    snapshot = cart_session().store.add_line(product, quantity)
    return jsonify(cart_payload(snapshot))


@cart_bp.patch("/items/<product_id>")
def update_item(product_id: str):
    payload = request.get_json(silent=True) or {}
    quantity = _quantity_arg(payload)
    if quantity is None:
        return jsonify({"error": "quantity must be an integer"}), 400
    snapshot = cart_session().store.set_quantity(product_id, quantity)
    return jsonify(cart_payload(snapshot))


@cart_bp.delete("/items/<product_id>")
def remove_item(product_id: str):
    snapshot = cart_session().store.remove_line(product_id)
    return jsonify(cart_payload(snapshot))


@cart_bp.delete("")
def clear_cart():
    snapshot = cart_session().store.clear()
    return jsonify(cart_payload(snapshot))


@cart_bp.post("/session/end")
def end_session():
    """Logout hook: tear down the session's cart."""
    sid = session_id(create=False)
    if sid:
        components()["cart_sessions"].end_session(sid)
    session.pop(SESSION_KEY, None)
    session.pop(TOKEN_KEY, None)
    return jsonify({"status": "ok"})
