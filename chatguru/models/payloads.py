"""
Pydantic models describing the structure of ChatGuru webhook payloads.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictBool, StrictFloat

from chatguru.models.media import MediaReference, normalize_media


class BotContext(BaseModel):
    """Bot context flag sent by ChatGuru when a bot handled the chat."""

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    chat_guru: StrictBool | None = Field(default=None, alias="ChatGuru")


class ChatGuruPayload(BaseModel):
    """
    Current ChatGuru webhook payload.

    Every field has a default; the platform omits or renames fields between
    versions, so nothing here is required. Media arrives either as
    ``media_url``/``media_type`` or as ``tipo_mensagem``/``url_arquivo``.
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    campanha_id: str = ""
    campanha_nome: str = ""
    origem: str = ""
    email: str = ""
    nome: str = ""
    tags: list[str] = Field(default_factory=list)
    texto_mensagem: str = Field(
        default="",
        validation_alias=AliasChoices("texto_mensagem", "mensagem", "message", "text"),
    )

    media_url: str | None = None
    media_type: str | None = None

    tipo_mensagem: str | None = None  # "image", "ptt", "video", ...
    url_arquivo: str | None = Field(
        default=None,
        validation_alias=AliasChoices("url_arquivo", "url_midia"),
    )

    campos_personalizados: dict[str, Any] = Field(default_factory=dict)
    bot_context: BotContext | None = None
    responsavel_nome: str | None = None
    responsavel_email: str | None = None
    link_chat: str = ""
    celular: str = ""
    phone_id: str | None = None
    chat_id: str | None = None
    chat_created: str | None = None

    def media(self) -> MediaReference:
        return normalize_media(
            media_url=self.media_url,
            media_type=self.media_type,
            message_kind=self.tipo_mensagem,
            file_url=self.url_arquivo,
        )

    def normalize_media_fields(self) -> ChatGuruPayload:
        """
        Return a copy with ``tipo_mensagem``/``url_arquivo`` folded into
        ``media_type``/``media_url``.

        Returns ``self`` when there is nothing to fill in.
        """
        media = self.media()
        if media.url == self.media_url and media.mime_type == self.media_type:
            return self
        return self.model_copy(update={"media_url": media.url, "media_type": media.mime_type})


class EventData(BaseModel):
    """Event body of the legacy ``event_type`` webhook."""

    model_config = ConfigDict(extra="allow", frozen=True)

    lead_name: str | None = None
    phone: str | None = None
    email: str | None = None
    project_name: str | None = None
    task_title: str | None = None
    annotation: str | None = None
    amount: StrictFloat | None = None
    status: str | None = None
    custom_data: dict[str, Any] = Field(default_factory=dict)


class EventTypePayload(BaseModel):
    """Legacy webhook format, kept for older ChatGuru configurations."""

    model_config = ConfigDict(extra="allow", frozen=True)

    id: str
    event_type: str
    timestamp: str
    data: EventData


class GenericPayload(BaseModel):
    """Minimal payload used when no known format applies."""

    model_config = ConfigDict(extra="allow", frozen=True)

    nome: str | None = None
    celular: str | None = None
    email: str | None = None
    mensagem: str | None = None


def input_keys(model: type[BaseModel]) -> frozenset[str]:
    """Every top-level key a model reads from its input, aliases included."""
    keys: set[str] = set()
    for name, field in model.model_fields.items():
        keys.add(name)
        if field.alias:
            keys.add(field.alias)
        alias = field.validation_alias
        if isinstance(alias, AliasChoices):
            keys.update(choice for choice in alias.choices if isinstance(choice, str))
        elif isinstance(alias, str):
            keys.add(alias)
    return frozenset(keys)
