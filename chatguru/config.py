"""
Configuration utilities for the ChatGuru integration service.
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError

from chatguru.constants import (
    DEFAULT_API_ENDPOINT,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_PHONE_ID,
    DEFAULT_TIMEOUT,
)

REQUIRED_KEYS = (
    "CHATGURU_API_TOKEN",
    "CHATGURU_ACCOUNT_ID",
)


class Settings(BaseModel):
    """Runtime configuration loaded from environment variables."""

    chatguru_api_token: str
    chatguru_account_id: str
    chatguru_api_endpoint: str = DEFAULT_API_ENDPOINT
    chatguru_phone_id: str = DEFAULT_PHONE_ID
    request_timeout: float = DEFAULT_TIMEOUT
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    receipt_annotation: Optional[str] = None


@lru_cache
def get_settings() -> Settings:
    """
    Load settings from environment variables.

    Uses python-dotenv to support local development with `.env` files.
    """
    load_dotenv()

    try:
        return Settings(
            chatguru_api_token=_require_env("CHATGURU_API_TOKEN"),
            chatguru_account_id=_require_env("CHATGURU_ACCOUNT_ID"),
            chatguru_api_endpoint=os.getenv("CHATGURU_API_ENDPOINT") or DEFAULT_API_ENDPOINT,
            chatguru_phone_id=os.getenv("CHATGURU_PHONE_ID") or DEFAULT_PHONE_ID,
            request_timeout=os.getenv("CHATGURU_TIMEOUT", DEFAULT_TIMEOUT),
            connect_timeout=os.getenv("CHATGURU_CONNECT_TIMEOUT", DEFAULT_CONNECT_TIMEOUT),
            receipt_annotation=_optional_env("CHATGURU_RECEIPT_ANNOTATION"),
        )
    except (ValidationError, KeyError) as exc:
        missing = ", ".join(sorted(_missing_keys()))
        raise RuntimeError(
            "Missing or invalid environment variables. "
            f"Ensure the following keys are defined: {missing or ', '.join(REQUIRED_KEYS)}"
        ) from exc


def _require_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise KeyError(name)
    return value


def _optional_env(name: str) -> Optional[str]:
    return os.getenv(name) or None


def _missing_keys() -> set[str]:
    return {key for key in REQUIRED_KEYS if not os.getenv(key)}
