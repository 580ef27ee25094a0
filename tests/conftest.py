"""Shared test fixtures for the WhatsApp webhook relay."""

from __future__ import annotations

import hashlib
import hmac as hmac_mod
from typing import Any
from unittest.mock import AsyncMock

import pytest

from src.config import WebhookSettings
from src.models import ForwardOutcome
from src.webhook.forwarder import DownstreamForwarder

MESSAGE_URL = "http://n8n.test/webhook/whatsapp-message"
ALERT_URL = "http://n8n.test/webhook/alert"


@pytest.fixture
def mock_forwarder() -> AsyncMock:
    forwarder = AsyncMock(spec=DownstreamForwarder)
    forwarder.forward.return_value = ForwardOutcome.DELIVERED
    return forwarder


# --- Factory functions for test data ---


def make_settings(**kwargs: Any) -> WebhookSettings:
    """Factory for WebhookSettings with both downstream URLs configured."""
    defaults: dict[str, Any] = {
        "webhook_secret": None,
        "message_webhook_url": MESSAGE_URL,
        "alert_webhook_url": ALERT_URL,
    }
    defaults.update(kwargs)
    return WebhookSettings(**defaults)


def make_event(event: str | None = "messages.received", **kwargs: Any) -> dict[str, Any]:
    """Factory for a provider webhook body."""
    body: dict[str, Any] = {
        "event": event,
        "data": {
            "from": "5511999999999@c.us",
            "to": "5511888888888@c.us",
            "key": {"id": "MSG123"},
            "message": {"conversation": "hello"},
            "messageTimestamp": 1700000000,
            "pushName": "Alice",
        },
    }
    body.update(kwargs)
    return body


def sign(secret: str, body: bytes) -> str:
    return hmac_mod.new(secret.encode(), body, hashlib.sha256).hexdigest()
