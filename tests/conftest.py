"""Shared fixtures for the ChatGuru integration tests."""

from __future__ import annotations

from typing import Callable

import httpx
import pytest

from chatguru.services.chatguru_client import ChatGuruClient


class RecordingTransport:
    """Collects requests and answers them with a configurable handler."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response] | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self._handler = handler or (lambda request: httpx.Response(201, text='{"result": "success"}'))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)


@pytest.fixture
def make_client() -> Callable[..., tuple[ChatGuruClient, RecordingTransport]]:
    """Build a ChatGuruClient backed by an in-memory transport."""

    def _make(
        handler: Callable[[httpx.Request], httpx.Response] | None = None,
        **kwargs,
    ) -> tuple[ChatGuruClient, RecordingTransport]:
        recorder = RecordingTransport(handler)
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
        options = {
            "api_token": "token123",
            "account_id": "acc456",
            "api_endpoint": "https://api.chatguru.app",
        }
        options.update(kwargs)
        return ChatGuruClient(http_client=http_client, **options), recorder

    return _make


@pytest.fixture
def chatguru_body() -> dict:
    """Webhook body in the current ChatGuru format."""
    return {
        "campanha_id": "123",
        "campanha_nome": "Suporte",
        "origem": "whatsapp",
        "email": "joao@example.com",
        "nome": "João Silva",
        "tags": ["vip", "novo"],
        "texto_mensagem": "Preciso de um orçamento",
        "campos_personalizados": {"Info_1": "Projeto X"},
        "bot_context": {"ChatGuru": True},
        "responsavel_nome": "Maria",
        "responsavel_email": "maria@example.com",
        "link_chat": "https://s15.chatguru.app/chats#abc",
        "celular": "5511999999999",
        "phone_id": "62558780e2923cc4705beee1",
        "chat_id": "chat_abc123",
        "chat_created": "2024-01-15 10:30:00",
    }
