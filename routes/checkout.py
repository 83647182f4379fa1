"""Checkout API: order summary and order placement."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from shop.errors import CheckoutInProgressError, EmptyCartError, TransportError, ValidationError

from ._session import cart_session, config


checkout_bp = Blueprint("storefront_checkout", __name__, url_prefix="/api/checkout")


@checkout_bp.get("/summary")
def summary():
    cs = cart_session()
    quote = cs.checkout.quote(cs.store.get_snapshot())
    body = quote.to_dict()
    body["free_shipping_threshold"] = float(cs.checkout.free_shipping_threshold)
    body["currency"] = config().currency
    return jsonify(body)


@checkout_bp.post("")
def place_order():
    form = request.get_json(silent=True) or request.form.to_dict()
    cs = cart_session()
    try:
        order = cs.checkout.build_order(cs.store.get_snapshot(), form)
    except EmptyCartError as exc:
        return jsonify({"error": str(exc), "code": "empty_cart"}), 400
    except ValidationError as exc:
        return jsonify({"error": exc.message, "code": "validation", "field": exc.field}), 400

    try:
        result = cs.checkout.submit(order)
    except CheckoutInProgressError as exc:
        return jsonify({"error": str(exc), "code": "in_progress"}), 409
    except TransportError as exc:
        return jsonify({"error": "Failed to place order. Please try again.", "detail": str(exc), "code": "transport"}), 502

    return jsonify({
        "status": "ok",
        "order": result,
        "summary": order.quote.to_dict(),
        "state": cs.checkout.state.value,
    })
