"""
HTTP routes that receive ChatGuru webhook notifications.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import (
    APIRouter,
    BackgroundTasks,
    Depends,
    HTTPException,
    Request,
    status,
)

from chatguru.errors import ChatGuruError, ChatGuruSerializationError
from chatguru.models.webhook import WebhookPayload, parse_webhook_body
from chatguru.services.chatguru_client import ChatGuruClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chatguru", tags=["chatguru"])


async def annotate_with_error_handling(
    client: ChatGuruClient,
    chat_id: str,
    phone_number: str,
    annotation_text: str,
) -> None:
    """
    Add an annotation from a background task.

    The webhook has already been acknowledged at this point, so failures are
    only logged.
    """
    try:
        await client.add_annotation(chat_id, phone_number, annotation_text)
    except ChatGuruError as e:
        logger.error(
            "Failed to add receipt annotation for %s: %s",
            phone_number,
            e,
            exc_info=True,
        )


def get_chatguru_client() -> ChatGuruClient:
    from chatguru.main import app

    client: ChatGuruClient = app.state.chatguru_client
    return client


def get_receipt_annotation() -> str | None:
    from chatguru.main import app

    return getattr(app.state, "receipt_annotation", None)


def summarize(payload: WebhookPayload) -> dict[str, Any]:
    return {
        "variant": payload.variant.value,
        "contact_name": payload.get_contact_name(),
        "phone_number": payload.get_phone_number(),
        "message_text": payload.get_message_text(),
        "chat_id": payload.get_chat_id(),
        "has_media": payload.has_media(),
        "media_url": payload.get_media_url(),
        "media_type": payload.get_media_type(),
    }


@router.post(
    "/webhook",
    status_code=status.HTTP_200_OK,
    summary="Handle incoming ChatGuru webhook notifications",
)
async def handle_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    chatguru_client: ChatGuruClient = Depends(get_chatguru_client),
    receipt_annotation: str | None = Depends(get_receipt_annotation),
) -> dict[str, Any]:
    body = await request.body()
    try:
        payload = parse_webhook_body(body)
    except ChatGuruSerializationError as exc:
        logger.warning("Rejecting malformed webhook body: %s", exc)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    summary = summarize(payload)
    logger.info(
        "Webhook received (%s) from %s, phone=%s, chat=%s, media=%s",
        summary["variant"],
        summary["contact_name"],
        summary["phone_number"],
        summary["chat_id"],
        summary["has_media"],
    )

    phone_number = summary["phone_number"]
    if receipt_annotation and phone_number:
        background_tasks.add_task(
            annotate_with_error_handling,
            chatguru_client,
            summary["chat_id"] or "",
            phone_number,
            receipt_annotation,
        )
        logger.info("Receipt annotation queued for %s", phone_number)

    return summary
