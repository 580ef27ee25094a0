"""FastAPI application exposing the WhatsApp webhook endpoint."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.config import WebhookSettings
from src.webhook.forwarder import DownstreamForwarder
from src.webhook.handler import WebhookHandler

logger = logging.getLogger(__name__)

WEBHOOK_PATH = "/api/webhook"

# Every method reaches the handler so it can answer 405 with its own body
_WEBHOOK_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def create_app_from_env() -> FastAPI:
    """Factory for uvicorn --factory: reads config from environment variables."""
    settings = WebhookSettings.from_env()
    logging.basicConfig(level=settings.log_level, format=_LOG_FORMAT)
    logger.info(
        "Webhook configured: signature=%s, message forward=%s, alert forward=%s",
        "on" if settings.webhook_secret else "off",
        "on" if settings.message_webhook_url else "off",
        "on" if settings.alert_webhook_url else "off",
    )
    return create_app(settings)


def create_app(
    settings: WebhookSettings,
    forwarder: DownstreamForwarder | None = None,
) -> FastAPI:
    """Create the webhook FastAPI app."""
    app = FastAPI(docs_url=None, redoc_url=None)
    handler = WebhookHandler(settings, forwarder)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.api_route(WEBHOOK_PATH, methods=_WEBHOOK_METHODS)
    async def whatsapp_webhook(request: Request) -> JSONResponse:
        body = await request.body()
        result = await handler.handle(request.method, request.headers, body)
        return JSONResponse(result.content, status_code=result.status_code)

    return app
