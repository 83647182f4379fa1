"""Tests for adopting the server cart into the local store."""

import pytest

from shop.errors import TransportError
from shop.services.cart_reconciler import CartReconciler
from shop.services.cart_store import CartStore
from tests.fixtures import make_line, make_product


def test_empty_local_cart_adopts_server_cart(store: CartStore, backend) -> None:
    backend.fetch_cart.return_value = [make_line("s1", quantity=2), make_line("s2")]
    assert CartReconciler(store, backend).reconcile() is True
    assert [line.product_id for line in store.get_snapshot().lines] == ["s1", "s2"]


def test_non_empty_local_cart_skips_fetch(store: CartStore, backend) -> None:
    store.add_line(make_product("p1"))
    assert CartReconciler(store, backend).reconcile() is False
    backend.fetch_cart.assert_not_called()


def test_repeated_merge_never_changes_non_empty_cart(store: CartStore, backend) -> None:
    store.add_line(make_product("p1"), 2)
    before = store.get_snapshot()
    reconciler = CartReconciler(store, backend)
    server = [make_line("s1", quantity=4)]
    for _ in range(3):
        assert reconciler.merge(server) is False
    assert store.get_snapshot() == before


def test_local_add_during_fetch_wins(store: CartStore, backend) -> None:
    def fetch_while_user_adds():
        store.add_line(make_product("p1"))
        return [make_line("s1")]

    backend.fetch_cart.side_effect = fetch_while_user_adds
    assert CartReconciler(store, backend).reconcile() is False
    assert [line.product_id for line in store.get_snapshot().lines] == ["p1"]


def test_fetch_failure_leaves_cart_and_propagates(store: CartStore, backend) -> None:
    backend.fetch_cart.side_effect = TransportError("backend request timed out")
    with pytest.raises(TransportError):
        CartReconciler(store, backend).reconcile()
    assert store.get_snapshot().is_empty


def test_server_lines_are_normalized(store: CartStore, backend) -> None:
    backend.fetch_cart.return_value = [
        make_line("s1", quantity=10, stock=4),
        make_line("s1", quantity=1, stock=4),
        make_line("s2", quantity=1, stock=0),
    ]
    CartReconciler(store, backend).reconcile()
    lines = store.get_snapshot().lines
    assert [(line.product_id, line.quantity) for line in lines] == [("s1", 4)]


def test_empty_server_cart_is_not_a_replacement(store: CartStore, backend) -> None:
    seen = []
    store.subscribe(seen.append)
    assert CartReconciler(store, backend).reconcile() is False
    assert seen == []


def test_anonymous_session_never_fetches(store: CartStore, backend) -> None:
    backend.access_token = None
    backend.fetch_cart.return_value = [make_line("s1")]
    assert CartReconciler(store, backend).reconcile() is False
    backend.fetch_cart.assert_not_called()
    assert store.get_snapshot().is_empty
