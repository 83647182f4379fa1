"""Helpers shared by the storefront blueprints."""

from __future__ import annotations

from typing import Any, Dict, Optional
from uuid import uuid4

from flask import current_app, request, session

from shop.models.cart_snapshot import CartSnapshot
from shop.services.cart_sessions import CartSession

SESSION_KEY = "cart_session_id"
TOKEN_KEY = "access_token"


def components() -> Dict[str, Any]:
    return current_app.extensions["storefront_components"]


def config():
    return current_app.config["STOREFRONT_CONFIG"]


def session_id(create: bool = True) -> Optional[str]:
    sid = session.get(SESSION_KEY)
    if not sid and create:
        sid = uuid4().hex
        session[SESSION_KEY] = sid
    return sid


def access_token() -> Optional[str]:
    """Bearer token from the request, else the one stored at sign-in."""
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return session.get(TOKEN_KEY) or None


def cart_session() -> CartSession:
    return components()["cart_sessions"].get(session_id(), access_token())


def cart_payload(snapshot: CartSnapshot) -> Dict[str, Any]:
    cs = cart_session()
    data = snapshot.to_dict()
    data["summary"] = cs.checkout.quote(snapshot).to_dict()
    data["currency"] = config().currency
    return data
