"""Seafood storefront cart and checkout Flask application."""

from __future__ import annotations

import logging
from typing import Optional

from flask import Flask

from config import StorefrontConfig
from routes import cart, checkout
from shop.db.session import build_session_factory
from shop.services.backend_client import BackendClient
from shop.services.cart_sessions import CartSessions
from shop.services.cart_storage import CartStorage


def create_app(config: Optional[StorefrontConfig] = None, backend: Optional[BackendClient] = None) -> Flask:
    config = config or StorefrontConfig.load()
    logging.basicConfig(level=config.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    app = Flask(__name__)
    app.config["SECRET_KEY"] = config.secret_key
    app.config["STOREFRONT_CONFIG"] = config

    backend = backend or BackendClient(config.api_base_url, timeout=config.api_timeout)
    storage = CartStorage(build_session_factory(config.database_url))
    components = {
        "backend": backend,
        "cart_storage": storage,
        "cart_sessions": CartSessions(
            storage,
            backend,
            free_shipping_threshold=config.free_shipping_threshold,
            standard_shipping_fee=config.standard_shipping_fee,
            max_sessions=config.max_cart_sessions,
            idle_ttl_seconds=config.cart_session_idle_ttl,
        ),
    }
    app.extensions["storefront_components"] = components

    app.register_blueprint(cart.cart_bp)
    app.register_blueprint(checkout.checkout_bp)

    return app


def main() -> None:
    app = create_app()
    app.run(host="0.0.0.0", port=5000, debug=False)


if __name__ == "__main__":
    main()
