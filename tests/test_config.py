"""Tests for settings loading."""

import json
from decimal import Decimal

import pytest

from config import StorefrontConfig, validate_currency


def test_defaults(tmp_path, monkeypatch) -> None:
    for key in ("FREE_SHIPPING_THRESHOLD", "STANDARD_SHIPPING_FEE", "CURRENCY", "API_BASE_URL", "DATABASE_URL"):
        monkeypatch.delenv(key, raising=False)
    config = StorefrontConfig.load(tmp_path)
    assert config.free_shipping_threshold == Decimal("500.00")
    assert config.standard_shipping_fee == Decimal("50.00")
    assert config.currency == "AED"
    assert config.database_url.endswith("app.db")


def test_settings_file_wins_over_env(tmp_path, monkeypatch) -> None:
    (tmp_path / "data").mkdir()
    (tmp_path / "data" / "settings.json").write_text(
        json.dumps({"FREE_SHIPPING_THRESHOLD": 750, "API_BASE_URL": "https://shop.test/api/"}),
        encoding="utf-8",
    )
    monkeypatch.setenv("FREE_SHIPPING_THRESHOLD", "100")
    monkeypatch.setenv("STANDARD_SHIPPING_FEE", "25")
    config = StorefrontConfig.load(tmp_path)
    assert config.free_shipping_threshold == Decimal("750.00")
    assert config.standard_shipping_fee == Decimal("25.00")
    assert config.api_base_url == "https://shop.test/api"


def test_broken_settings_file_is_ignored(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("FREE_SHIPPING_THRESHOLD", raising=False)
    (tmp_path / "data").mkdir()
    (tmp_path / "data" / "settings.json").write_text("{not json", encoding="utf-8")
    assert StorefrontConfig.load(tmp_path).free_shipping_threshold == Decimal("500.00")


def test_currency_validation() -> None:
    assert validate_currency(" inr ") == "INR"
    with pytest.raises(ValueError):
        validate_currency("DIRHAM")


def test_session_cache_limits_from_env(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("MAX_CART_SESSIONS", "25")
    monkeypatch.setenv("CART_SESSION_IDLE_TTL", "90")
    config = StorefrontConfig.load(tmp_path)
    assert config.max_cart_sessions == 25
    assert config.cart_session_idle_ttl == 90.0
