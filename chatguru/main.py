"""
FastAPI application entry point for the ChatGuru webhook integration.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from chatguru.config import get_settings
from chatguru.constants import APP_NAME, HEALTH_ENDPOINT, VERSION
from chatguru.routes import webhook
from chatguru.services.chatguru_client import ChatGuruClient

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI):
    """
    Create and teardown singleton services used across the app.
    """
    settings = get_settings()
    logger.info("Initializing ChatGuru client for account %s", settings.chatguru_account_id)

    application.state.chatguru_client = ChatGuruClient(
        api_token=settings.chatguru_api_token,
        account_id=settings.chatguru_account_id,
        api_endpoint=settings.chatguru_api_endpoint,
        phone_id=settings.chatguru_phone_id,
        timeout=settings.request_timeout,
        connect_timeout=settings.connect_timeout,
    )
    application.state.receipt_annotation = settings.receipt_annotation

    try:
        yield
    finally:
        logger.info("Shutting down ChatGuru client")
        await application.state.chatguru_client.close()


app = FastAPI(
    title=APP_NAME,
    version=VERSION,
    lifespan=lifespan,
)


@app.get(HEALTH_ENDPOINT, tags=["health"])
async def health() -> dict[str, str]:
    return {"status": "ok"}


app.include_router(webhook.router)
