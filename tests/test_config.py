"""Tests for environment-based configuration."""

import pytest

from chatguru.config import get_settings
from chatguru.constants import DEFAULT_API_ENDPOINT, DEFAULT_PHONE_ID

ENV_KEYS = (
    "CHATGURU_API_TOKEN",
    "CHATGURU_ACCOUNT_ID",
    "CHATGURU_API_ENDPOINT",
    "CHATGURU_PHONE_ID",
    "CHATGURU_TIMEOUT",
    "CHATGURU_CONNECT_TIMEOUT",
    "CHATGURU_RECEIPT_ANNOTATION",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults(monkeypatch):
    monkeypatch.setenv("CHATGURU_API_TOKEN", "token123")
    monkeypatch.setenv("CHATGURU_ACCOUNT_ID", "acc456")

    settings = get_settings()

    assert settings.chatguru_api_token == "token123"
    assert settings.chatguru_account_id == "acc456"
    assert settings.chatguru_api_endpoint == DEFAULT_API_ENDPOINT
    assert settings.chatguru_phone_id == DEFAULT_PHONE_ID
    assert settings.request_timeout == 10.0
    assert settings.connect_timeout == 3.0
    assert settings.receipt_annotation is None


def test_overrides(monkeypatch):
    monkeypatch.setenv("CHATGURU_API_TOKEN", "token123")
    monkeypatch.setenv("CHATGURU_ACCOUNT_ID", "acc456")
    monkeypatch.setenv("CHATGURU_API_ENDPOINT", "https://s16.chatguru.app/")
    monkeypatch.setenv("CHATGURU_TIMEOUT", "5")
    monkeypatch.setenv("CHATGURU_RECEIPT_ANNOTATION", "Recebido")

    settings = get_settings()

    assert settings.chatguru_api_endpoint == "https://s16.chatguru.app/"
    assert settings.request_timeout == 5.0
    assert settings.receipt_annotation == "Recebido"


def test_missing_required_keys(monkeypatch):
    monkeypatch.setenv("CHATGURU_API_TOKEN", "token123")

    with pytest.raises(RuntimeError, match="CHATGURU_ACCOUNT_ID"):
        get_settings()
