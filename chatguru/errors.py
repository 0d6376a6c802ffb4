"""
Exceptions raised by the ChatGuru integration layer.
"""

from __future__ import annotations


class ChatGuruError(Exception):
    """Base class for every ChatGuru integration error."""


class ChatGuruNetworkError(ChatGuruError):
    """Raised when the HTTP call could not complete (DNS, refused, timeout)."""


class ChatGuruAPIError(ChatGuruError):
    """Raised when the ChatGuru API answers with a non-success status.

    The notifier only raises this when built with ``raise_on_api_error=True``;
    by default such answers are logged and absorbed.
    """

    def __init__(self, message: str, status_code: int, response_text: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response_text = response_text


class ChatGuruSerializationError(ChatGuruError):
    """Raised when a webhook body cannot be decoded into any known payload."""


class ChatGuruValidationError(ChatGuruError):
    """Raised when caller-supplied arguments are unusable (e.g. empty recipient)."""


class ChatGuruInternalError(ChatGuruError):
    """Raised on invariant violations inside the integration layer."""
