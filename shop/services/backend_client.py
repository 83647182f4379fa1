"""HTTP client for the storefront backend (catalog, server cart, orders)."""

import logging
from typing import Any, Dict, List, Optional

import requests

from ..errors import TransportError
from ..models.cart_line import CartLine
from ..models.product import ProductRecord
from ..utils.dto import to_cart_lines, to_product_record


class BackendClient:
    DEFAULT_TIMEOUT = 20

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        access_token: Optional[str] = None,
        http: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.access_token = (access_token or "").strip() or None
        self._http = http or requests.Session()
        self.logger = logging.getLogger(__name__)

    def with_token(self, access_token: Optional[str]) -> "BackendClient":
        """Same connection pool, different bearer token."""
        return BackendClient(self.base_url, timeout=self.timeout, access_token=access_token, http=self._http)

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            msg = body.get("detail") or body.get("message")
            if msg:
                return str(msg)
        return f"backend returned HTTP {response.status_code}"

    def _request(self, method: str, path: str, json: Optional[Any] = None) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            response = self._http.request(method, url, json=json, headers=self._headers(), timeout=self.timeout)
        except requests.exceptions.Timeout as exc:
            self.logger.warning("%s %s timed out", method, url)
            raise TransportError("backend request timed out") from exc
        except requests.exceptions.RequestException as exc:
            self.logger.warning("%s %s failed: %s", method, url, exc)
            raise TransportError(f"backend request failed: {exc}") from exc
        if response.status_code >= 400:
            message = self._error_message(response)
            self.logger.warning("%s %s -> %s %s", method, url, response.status_code, message)
            raise TransportError(message, status_code=response.status_code)
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError("backend returned invalid JSON", status_code=response.status_code) from exc

    # --- catalog ---

    def get_product(self, product_id: str) -> ProductRecord:
        data = self._request("GET", f"/products/{product_id}/")
        if not isinstance(data, dict):
            raise TransportError("unexpected product payload")
        try:
            return to_product_record(data)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise TransportError(f"unexpected product payload: {exc}") from exc

    # --- server cart ---

    def fetch_cart(self) -> List[CartLine]:
        """GET /cart/me/ mapped onto cart lines."""
        data = self._request("GET", "/cart/me/")
        try:
            return to_cart_lines(data or {})
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise TransportError(f"unexpected cart payload: {exc}") from exc

    def sync_cart(self, items: List[Dict[str, Any]]) -> None:
        """POST /cart/sync/ replacing the whole server cart."""
        self._request("POST", "/cart/sync/", json={"items": items})

    # --- orders ---

    def create_order(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        data = self._request("POST", "/orders/", json=payload)
        return data if isinstance(data, dict) else {}
