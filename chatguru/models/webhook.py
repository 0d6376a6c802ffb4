"""
Resolution of raw ChatGuru webhook bodies into a canonical payload.

ChatGuru sends webhooks in several shapes with no discriminator field. The
resolver probes the known shapes from the strictest to the most permissive
and commits to the first one that validates:

1. the legacy ``event_type`` format (``id``, ``event_type``, ``timestamp`` and
   a ``data`` object are all required);
2. the current ChatGuru format (every field optional, but at least one of its
   keys must be present);
3. the generic fallback, which accepts any object with sane field types.
"""

from __future__ import annotations

import enum
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from pydantic import BaseModel, ValidationError

from chatguru.constants import DEFAULT_CONTACT_NAME
from chatguru.errors import ChatGuruInternalError, ChatGuruSerializationError
from chatguru.models.media import MediaReference
from chatguru.models.payloads import (
    ChatGuruPayload,
    EventTypePayload,
    GenericPayload,
    input_keys,
)

logger = logging.getLogger(__name__)

EVENT_REQUIRED_KEYS = frozenset({"id", "event_type", "timestamp", "data"})
CHATGURU_KEYS = input_keys(ChatGuruPayload)


class PayloadVariant(str, enum.Enum):
    CHATGURU = "chatguru"
    EVENT_TYPE = "event_type"
    GENERIC = "generic"


@dataclass(frozen=True)
class WebhookPayload:
    """
    Canonical view of an inbound webhook, independent of its wire format.

    Wraps whichever payload model matched and exposes accessors that behave
    the same for every variant.
    """

    variant: PayloadVariant
    payload: ChatGuruPayload | EventTypePayload | GenericPayload

    def get_contact_name(self) -> str:
        """Contact name, or ``"Contato"`` when a legacy/generic payload has none."""
        if isinstance(self.payload, ChatGuruPayload):
            return self.payload.nome
        if isinstance(self.payload, EventTypePayload):
            return self.payload.data.lead_name or DEFAULT_CONTACT_NAME
        if isinstance(self.payload, GenericPayload):
            return self.payload.nome or DEFAULT_CONTACT_NAME
        raise _unknown_payload(self.payload)

    def get_phone_number(self) -> str | None:
        if isinstance(self.payload, ChatGuruPayload):
            return self.payload.celular or None
        if isinstance(self.payload, EventTypePayload):
            return self.payload.data.phone
        if isinstance(self.payload, GenericPayload):
            return self.payload.celular
        raise _unknown_payload(self.payload)

    def get_message_text(self) -> str | None:
        if isinstance(self.payload, ChatGuruPayload):
            return self.payload.texto_mensagem or None
        if isinstance(self.payload, EventTypePayload):
            return self.payload.data.annotation
        if isinstance(self.payload, GenericPayload):
            return self.payload.mensagem
        raise _unknown_payload(self.payload)

    def get_email(self) -> str | None:
        if isinstance(self.payload, ChatGuruPayload):
            return self.payload.email or None
        if isinstance(self.payload, EventTypePayload):
            return self.payload.data.email
        if isinstance(self.payload, GenericPayload):
            return self.payload.email
        raise _unknown_payload(self.payload)

    def get_chat_id(self) -> str | None:
        """Chat id; legacy payloads use the event id, generic ones have none."""
        if isinstance(self.payload, ChatGuruPayload):
            return self.payload.chat_id
        if isinstance(self.payload, EventTypePayload):
            return self.payload.id
        return None

    def has_media(self) -> bool:
        """Only the current ChatGuru format carries media fields."""
        if isinstance(self.payload, ChatGuruPayload):
            return self.payload.media_url is not None or self.payload.url_arquivo is not None
        return False

    def get_media(self) -> MediaReference | None:
        if not self.has_media():
            return None
        return self.payload.media()

    def get_media_url(self) -> str | None:
        if isinstance(self.payload, ChatGuruPayload):
            return self.payload.media().url
        return None

    def get_media_type(self) -> str | None:
        """MIME type of the attached media, derived from ``tipo_mensagem`` if needed."""
        if isinstance(self.payload, ChatGuruPayload):
            return self.payload.media().mime_type
        return None

    def normalize_media_fields(self) -> WebhookPayload:
        if not isinstance(self.payload, ChatGuruPayload):
            return self
        normalized = self.payload.normalize_media_fields()
        if normalized is self.payload:
            return self
        return WebhookPayload(variant=self.variant, payload=normalized)


def _unknown_payload(payload: Any) -> ChatGuruInternalError:
    return ChatGuruInternalError(f"Unsupported payload type: {type(payload).__name__}")


def _looks_like_event(raw: Mapping[str, Any]) -> bool:
    return EVENT_REQUIRED_KEYS.issubset(raw) and isinstance(raw.get("data"), Mapping)


def _looks_like_chatguru(raw: Mapping[str, Any]) -> bool:
    return not CHATGURU_KEYS.isdisjoint(raw)


_CANDIDATES: tuple[tuple[PayloadVariant, type[BaseModel], Callable[[Mapping[str, Any]], bool]], ...] = (
    (PayloadVariant.EVENT_TYPE, EventTypePayload, _looks_like_event),
    (PayloadVariant.CHATGURU, ChatGuruPayload, _looks_like_chatguru),
    (PayloadVariant.GENERIC, GenericPayload, lambda raw: True),
)


def resolve(raw: Any) -> WebhookPayload:
    """
    Resolve a decoded webhook body into a :class:`WebhookPayload`.

    Raises:
        ChatGuruSerializationError: if ``raw`` is not an object, or its field
            types fit none of the known formats.
    """
    if not isinstance(raw, Mapping):
        raise ChatGuruSerializationError(
            f"Webhook body must be a JSON object, got {type(raw).__name__}"
        )

    last_error: ValidationError | None = None
    for variant, model, probe in _CANDIDATES:
        if not probe(raw):
            continue
        try:
            payload = model.model_validate(raw)
        except ValidationError as exc:
            logger.debug("Webhook body rejected as %s: %s", variant.value, exc.errors())
            last_error = exc
            continue
        logger.debug("Webhook body resolved as %s", variant.value)
        return WebhookPayload(variant=variant, payload=payload)

    raise ChatGuruSerializationError(
        f"Webhook body does not match any known format: {last_error}"
    ) from last_error


def parse_webhook_body(body: bytes | str) -> WebhookPayload:
    """Decode a raw JSON webhook body and resolve it."""
    try:
        raw = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ChatGuruSerializationError(f"Webhook body is not valid JSON: {exc}") from exc
    return resolve(raw)
