"""Tests for environment-driven Settings."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from storefront.config import Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("UPLOAD_DIR", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    config = Settings(_env_file=None)

    assert config.products_db_path == "./data/db/products.db"
    assert config.orders_db_path == "./data/db/orders.db"
    assert config.upload_dir == "./data/uploads"
    assert config.max_file_size == 10_485_760
    assert config.order_unit_price == 10.0
    assert config.log_level == "INFO"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("ORDER_UNIT_PRICE", "2.5")
    monkeypatch.setenv("log_level", "debug")

    config = Settings(_env_file=None)

    assert config.order_unit_price == 2.5
    assert config.log_level == "DEBUG"


def test_cors_origins_list():
    config = Settings(_env_file=None, cors_origins="http://a.test, http://b.test,")
    assert config.cors_origins_list == ["http://a.test", "http://b.test"]


def test_invalid_log_level():
    with pytest.raises(PydanticValidationError):
        Settings(_env_file=None, log_level="LOUD")


def test_file_size_bounds():
    with pytest.raises(PydanticValidationError):
        Settings(_env_file=None, max_file_size=10)
