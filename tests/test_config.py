"""
Tests for environment configuration and logging setup.
"""

import json
import logging

import pytest

from order_card_engine.config import configure_logging, get_app_config, load_configured_fields
from order_card_engine.fields import DEFAULT_FIELDS, FieldConfigError


def test_defaults(monkeypatch):
    for name in ("ORDER_CARD_FIELDS_PATH", "ORDER_CARD_LOG_LEVEL", "ORDER_CARD_ACTING_USER"):
        monkeypatch.delenv(name, raising=False)
    config = get_app_config()
    assert config.fields_path is None
    assert config.log_level == "INFO"
    assert config.acting_user_id == "u1"
    assert load_configured_fields(config) == list(DEFAULT_FIELDS)


def test_fields_from_file(monkeypatch, tmp_path):
    path = tmp_path / "fields.json"
    path.write_text(json.dumps({"fields": [{"id": "orderId", "sourcePaths": ["name"]}]}), encoding="utf-8")
    monkeypatch.setenv("ORDER_CARD_FIELDS_PATH", str(path))
    monkeypatch.setenv("ORDER_CARD_LOG_LEVEL", "debug")
    config = get_app_config()
    assert config.log_level == "DEBUG"
    assert [f.id for f in load_configured_fields(config)] == ["orderId"]


def test_bad_fields_file(monkeypatch, tmp_path):
    path = tmp_path / "fields.json"
    path.write_text('[{"id": "x", "type": "number"}]', encoding="utf-8")
    monkeypatch.setenv("ORDER_CARD_FIELDS_PATH", str(path))
    with pytest.raises(FieldConfigError):
        load_configured_fields(get_app_config())


def test_configure_logging_once():
    logger = configure_logging("WARNING")
    configure_logging("WARNING")
    handlers = [h for h in logger.handlers if getattr(h, "_order_card_handler", False)]
    assert len(handlers) == 1
    assert logger.level == logging.WARNING
    logger.setLevel(logging.NOTSET)
