"""
Client for interacting with the ChatGuru HTTP API.

Annotations and confirmation messages are a best-effort side channel: a
transport failure is raised as :class:`ChatGuruNetworkError`, but when the API
itself answers with an error the answer is logged and the call returns
normally, so the caller's main flow is never rolled back over a notification.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import re
from urllib.parse import quote, urlencode

import httpx

from chatguru.constants import (
    ACTION_MESSAGE_SEND,
    ACTION_NOTE_ADD,
    API_PATH,
    CHAT_NOT_FOUND_MARKERS,
    DEFAULT_API_ENDPOINT,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_PHONE_ID,
    DEFAULT_TIMEOUT,
)
from chatguru.errors import (
    ChatGuruAPIError,
    ChatGuruNetworkError,
    ChatGuruValidationError,
)

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D")


class DeliveryOutcome(str, enum.Enum):
    OK = "ok"
    WARN = "warn"  # chat does not exist on the platform side
    ERROR = "error"


def classify_response(status_code: int, body: str) -> DeliveryOutcome:
    """
    Decide how a ChatGuru API answer should be treated.

    2xx is a success. A body saying the chat does not exist is expected for
    inactive or never-started conversations and only deserves a warning.
    Anything else is an error.
    """
    if 200 <= status_code < 300:
        return DeliveryOutcome.OK
    if any(marker in body for marker in CHAT_NOT_FOUND_MARKERS):
        return DeliveryOutcome.WARN
    return DeliveryOutcome.ERROR


def clean_phone_number(phone_number: str) -> str:
    """Strip everything but digits: ``"+55 (11) 99999-9999"`` -> ``"5511999999999"``."""
    return _NON_DIGITS.sub("", phone_number)


def build_api_base_url(api_endpoint: str) -> str:
    """Return ``api_endpoint`` ending in exactly one ``/api/v1`` segment."""
    base = api_endpoint.rstrip("/")
    if base.endswith(API_PATH):
        return base
    return f"{base}{API_PATH}"


class ChatGuruClient:
    """
    Thin wrapper around the ChatGuru API actions used by the automation.

    Every parameter travels in the query string of a POST with an empty body.
    An ``httpx.AsyncClient`` may be shared between instances; it is only
    closed by :meth:`close` when this client created it.
    """

    def __init__(
        self,
        *,
        api_token: str,
        account_id: str,
        api_endpoint: str = DEFAULT_API_ENDPOINT,
        phone_id: str = DEFAULT_PHONE_ID,
        timeout: float = DEFAULT_TIMEOUT,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
        raise_on_api_error: bool = False,
    ) -> None:
        self.api_token = api_token
        self.account_id = account_id
        self.base_url = build_api_base_url(api_endpoint)
        self.phone_id = phone_id
        self.timeout = timeout
        self.raise_on_api_error = raise_on_api_error
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=connect_timeout)
        )
        logger.info(
            "ChatGuru client configured for %s (timeout=%ss, connect=%ss)",
            self.base_url,
            timeout,
            connect_timeout,
        )

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def build_url(
        self,
        *,
        action: str,
        text_field: str,
        text: str,
        phone_number: str,
        phone_id: str | None = None,
    ) -> str:
        """Build the full request URL for an API action."""
        clean_phone = clean_phone_number(phone_number)
        if not clean_phone:
            raise ChatGuruValidationError(
                f"Phone number {phone_number!r} has no digits"
            )
        params = {
            "key": self.api_token,
            "account_id": self.account_id,
            "phone_id": phone_id or self.phone_id,
            "action": action,
            text_field: text,
            "chat_number": clean_phone,
        }
        return f"{self.base_url}?{urlencode(params, quote_via=quote, safe='')}"

    async def add_annotation(
        self,
        chat_id: str,
        phone_number: str,
        annotation_text: str,
    ) -> DeliveryOutcome:
        """
        Add an agent-visible note to the chat with ``phone_number``.

        ``chat_id`` is only used for logging; the API locates the chat by
        number.
        """
        url = self.build_url(
            action=ACTION_NOTE_ADD,
            text_field="note_text",
            text=annotation_text,
            phone_number=phone_number,
        )
        logger.info("Adding annotation to chat %s: %s", chat_id, annotation_text)
        return await self._post(
            url,
            description=f"annotation for chat {chat_id}",
            phone_number=phone_number,
            text=annotation_text,
        )

    async def send_confirmation_message(
        self,
        phone_number: str,
        message: str,
        phone_id: str | None = None,
    ) -> DeliveryOutcome:
        """
        Send a message straight to the contact over WhatsApp.

        Only works when a chat with the number already exists on ChatGuru.
        """
        url = self.build_url(
            action=ACTION_MESSAGE_SEND,
            text_field="text",
            text=message,
            phone_number=phone_number,
            phone_id=phone_id,
        )
        logger.info("Sending confirmation message to %s: %s", phone_number, message)
        return await self._post(
            url,
            description=f"confirmation message to {phone_number}",
            phone_number=phone_number,
            text=message,
        )

    async def _post(
        self,
        url: str,
        *,
        description: str,
        phone_number: str,
        text: str,
    ) -> DeliveryOutcome:
        # httpx timeouts apply per phase; the deadline bounds the whole call.
        try:
            response = await asyncio.wait_for(self._client.post(url), self.timeout)
        except asyncio.TimeoutError as exc:
            raise ChatGuruNetworkError(
                f"Failed to send {description}: timed out after {self.timeout}s"
            ) from exc
        except httpx.RequestError as exc:
            raise ChatGuruNetworkError(f"Failed to send {description}: {exc}") from exc

        outcome = classify_response(response.status_code, response.text)

        if outcome is DeliveryOutcome.OK:
            logger.info("Sent %s: %s", description, response.text)
            logger.info("Mensagem enviada com sucesso: %s", text)
            return outcome

        if outcome is DeliveryOutcome.WARN:
            logger.warning(
                "Chat not found for %s (phone: %s). This is normal for inactive chats.",
                description,
                phone_number,
            )
        else:
            logger.error(
                "Failed to send %s. Status: %s, Response: %s",
                description,
                response.status_code,
                response.text[:500] if response.text else "No response body",
            )

        if self.raise_on_api_error:
            raise ChatGuruAPIError(
                f"ChatGuru API rejected {description} with status {response.status_code}",
                status_code=response.status_code,
                response_text=response.text,
            )
        return outcome
