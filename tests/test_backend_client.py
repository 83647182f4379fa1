"""Tests for the backend HTTP client and payload mapping."""

from decimal import Decimal
from unittest.mock import Mock

import pytest
import requests

from shop.errors import TransportError
from shop.services.backend_client import BackendClient
from shop.utils.dto import DEFAULT_STOCK, to_cart_line, to_product_record


def _response(status: int = 200, body=None) -> Mock:
    response = Mock(spec=requests.Response)
    response.status_code = status
    response.content = b"" if body is None else b"{}"
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    return response


def _client(*responses) -> BackendClient:
    http = Mock(spec=requests.Session)
    http.request.side_effect = list(responses)
    return BackendClient("http://backend.test/api/", timeout=5, access_token="tok", http=http)


CART_PAYLOAD = {
    "id": 1,
    "items": [
        {
            "id": 10,
            "product": 3,
            "quantity": 2,
            "product_details": {
                "id": 3,
                "name": "Tiger Prawns",
                "price": "120.00",
                "discount_price": "99.00",
                "final_price": "99.00",
                "image": "/media/prawns.jpg",
                "images": [{"id": 1, "image": "/media/prawns-feature.jpg", "is_feature": True}],
                "sku": "PRW-1",
                "stock": 8,
                "category_name": "Shellfish",
            },
        },
        {"id": 11, "product": 4, "quantity": 1, "product_details": {"price": "55.50", "discount_price": None}},
    ],
}


class TestRequests:
    def test_fetch_cart_maps_items(self) -> None:
        client = _client(_response(200, CART_PAYLOAD))
        lines = client.fetch_cart()
        assert [line.product_id for line in lines] == ["3", "4"]
        assert lines[0].unit_final_price == Decimal("99.00")
        assert lines[0].image_ref == "/media/prawns-feature.jpg"
        assert lines[1].stock_ceiling == DEFAULT_STOCK
        assert lines[1].name == "Product #4"

    def test_bearer_token_and_timeout(self) -> None:
        client = _client(_response(200, {"items": []}))
        client.fetch_cart()
        args, kwargs = client._http.request.call_args
        assert args == ("GET", "http://backend.test/api/cart/me/")
        assert kwargs["headers"]["Authorization"] == "Bearer tok"
        assert kwargs["timeout"] == 5

    def test_create_order_posts_payload(self) -> None:
        client = _client(_response(201, {"id": 9, "status": "pending"}))
        assert client.create_order({"items": []}) == {"id": 9, "status": "pending"}
        args, kwargs = client._http.request.call_args
        assert args == ("POST", "http://backend.test/api/orders/")
        assert kwargs["json"] == {"items": []}

    def test_sync_cart(self) -> None:
        client = _client(_response(204))
        client.sync_cart([{"product": "3", "quantity": 2}])
        _, kwargs = client._http.request.call_args
        assert kwargs["json"] == {"items": [{"product": "3", "quantity": 2}]}

    def test_http_error_uses_detail(self) -> None:
        client = _client(_response(400, {"detail": "Insufficient stock"}))
        with pytest.raises(TransportError) as excinfo:
            client.create_order({})
        assert str(excinfo.value) == "Insufficient stock"
        assert excinfo.value.status_code == 400

    def test_http_error_without_body(self) -> None:
        client = _client(_response(500, ValueError("no json")))
        with pytest.raises(TransportError) as excinfo:
            client.fetch_cart()
        assert excinfo.value.status_code == 500

    def test_connection_error(self) -> None:
        client = _client(requests.exceptions.ConnectionError("refused"))
        with pytest.raises(TransportError):
            client.fetch_cart()

    def test_timeout(self) -> None:
        client = _client(requests.exceptions.Timeout())
        with pytest.raises(TransportError, match="timed out"):
            client.get_product("3")

    def test_malformed_product_price(self) -> None:
        client = _client(_response(200, {"id": 1, "price": "n/a", "stock": 3}))
        with pytest.raises(TransportError, match="unexpected product payload"):
            client.get_product("1")

    def test_malformed_cart_item(self) -> None:
        client = _client(_response(200, {"items": ["not-an-item"]}))
        with pytest.raises(TransportError, match="unexpected cart payload"):
            client.fetch_cart()

    def test_with_token_shares_session(self) -> None:
        client = _client()
        other = client.with_token("other")
        assert other._http is client._http
        assert other.access_token == "other"


class TestMapping:
    def test_product_record(self) -> None:
        record = to_product_record(CART_PAYLOAD["items"][0]["product_details"])
        assert record.id == "3"
        assert record.stock == 8
        assert record.category == "Shellfish"
        assert record.base_price == Decimal("120.00")
        assert record.discount_price == Decimal("99.00")

    def test_product_without_id(self) -> None:
        with pytest.raises(ValueError):
            to_product_record({"price": "1"})

    def test_cart_line_falls_back_to_item_product(self) -> None:
        line = to_cart_line({"product": 12, "quantity": 3, "product_details": {"price": "10"}})
        assert line.product_id == "12"
        assert line.quantity == 3

    def test_non_dict_images_fall_back_to_image(self) -> None:
        record = to_product_record({"id": 5, "price": "10", "image": "/media/5.jpg", "images": ["/media/x.jpg"]})
        assert record.image_ref == "/media/5.jpg"
