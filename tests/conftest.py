"""Shared fixtures for cart and checkout tests."""

from unittest.mock import Mock

import pytest

from shop.db.session import build_session_factory
from shop.services.backend_client import BackendClient
from shop.services.cart_storage import CartStorage
from shop.services.cart_store import CartStore


@pytest.fixture
def session_factory(tmp_path):
    return build_session_factory(f"sqlite:///{tmp_path / 'cart.db'}")


@pytest.fixture
def storage(session_factory) -> CartStorage:
    return CartStorage(session_factory)


@pytest.fixture
def store(storage) -> CartStore:
    return CartStore("sess-1", storage)


@pytest.fixture
def backend() -> Mock:
    client = Mock(spec=BackendClient)
    client.access_token = "user-token"

    def with_token(token):
        client.access_token = token
        return client

    client.with_token.side_effect = with_token
    client.fetch_cart.return_value = []
    client.create_order.return_value = {"id": 42, "status": "pending"}
    return client
