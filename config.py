"""Storefront cart service configuration."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Optional

from shop.pricing import to_money

logger = logging.getLogger(__name__)

DEFAULT_FREE_SHIPPING_THRESHOLD = "500"
DEFAULT_STANDARD_SHIPPING_FEE = "50"


def validate_currency(value: Optional[str]) -> str:
    v = (value or "AED").strip().upper()
    if len(v) != 3:
        raise ValueError("Invalid currency code: expected ISO4217 length 3")
    return v


def _load_settings_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Could not read settings from %s: %s", path, exc)
        return {}
    return data if isinstance(data, dict) else {}


@dataclass
class StorefrontConfig:
    """Settings for the cart and checkout service.

    ``data/settings.json`` wins over environment variables, which win over
    the defaults.
    """

    secret_key: str
    database_url: str
    log_level: str
    api_base_url: str
    api_timeout: float
    currency: str
    free_shipping_threshold: Decimal
    standard_shipping_fee: Decimal
    root: Path
    max_cart_sessions: int = 1000
    cart_session_idle_ttl: float = 1800.0

    @property
    def data_dir(self) -> Path:
        return self.root / "data"

    @property
    def settings_file(self) -> Path:
        return self.data_dir / "settings.json"

    @classmethod
    def load(cls, root: Optional[Path] = None) -> "StorefrontConfig":
        root = root or Path(__file__).resolve().parent
        settings = _load_settings_file(root / "data" / "settings.json")

        def pick(key: str, default: str) -> str:
            value = settings.get(key)
            if value is None or value == "":
                value = os.environ.get(key)
            return default if value is None or value == "" else str(value)

        return cls(
            secret_key=pick("SECRET_KEY", "dev_secret"),
            database_url=pick("DATABASE_URL", f"sqlite:///{root / 'data' / 'app.db'}"),
            log_level=pick("LOG_LEVEL", "INFO").upper(),
            api_base_url=pick("API_BASE_URL", "http://127.0.0.1:8000/api").rstrip("/"),
            api_timeout=float(pick("API_TIMEOUT", "20")),
            currency=validate_currency(pick("CURRENCY", "AED")),
            free_shipping_threshold=to_money(
                pick("FREE_SHIPPING_THRESHOLD", DEFAULT_FREE_SHIPPING_THRESHOLD), "FREE_SHIPPING_THRESHOLD"
            ),
            standard_shipping_fee=to_money(
                pick("STANDARD_SHIPPING_FEE", DEFAULT_STANDARD_SHIPPING_FEE), "STANDARD_SHIPPING_FEE"
            ),
            root=root,
            max_cart_sessions=int(pick("MAX_CART_SESSIONS", "1000")),
            cart_session_idle_ttl=float(pick("CART_SESSION_IDLE_TTL", "1800")),
        )
