"""Event classification and normalization for provider webhooks.

Each recognized event kind maps to one coroutine. Only inbound messages and
session disconnects produce a forward; everything else is logged and
acknowledged.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from src.config import WebhookSettings
from src.models import (
    DISCONNECTED_STATUSES,
    ContactDetails,
    DisconnectAlert,
    EventKind,
    ForwardOutcome,
    IncomingEvent,
    MessageDetails,
    NormalizedMessage,
)
from src.webhook.forwarder import DownstreamForwarder
from src.webhook.lookup import coalesce, dig

logger = logging.getLogger(__name__)

_Handler = Callable[[IncomingEvent], Awaitable[ForwardOutcome | None]]


def normalize_message(data: Any) -> NormalizedMessage:
    """Flatten a provider message payload into the downstream message shape."""
    sender = dig(data, "from")
    return NormalizedMessage(
        from_=sender,
        to=dig(data, "to"),
        message=MessageDetails(
            id=dig(data, "key", "id"),
            text=coalesce(
                dig(data, "message", "conversation"),
                dig(data, "message", "extendedTextMessage", "text"),
                dig(data, "text"),
            ),
            timestamp=dig(data, "messageTimestamp"),
            type=coalesce(dig(data, "message", "messageType"), "text"),
        ),
        contact=ContactDetails(
            name=coalesce(dig(data, "pushName"), dig(data, "name")),
            phone=sender,
        ),
        raw_data=data,
    )


def session_id_of(incoming: IncomingEvent) -> str | None:
    candidate = coalesce(
        incoming.session_id,
        dig(incoming.data, "session_id"),
        dig(incoming.data, "session"),
    )
    return candidate if isinstance(candidate, str) else None


class EventRouter:
    """Dispatches an IncomingEvent to the handler for its kind."""

    def __init__(
        self, settings: WebhookSettings, forwarder: DownstreamForwarder,
    ) -> None:
        self._settings = settings
        self._forwarder = forwarder
        self._handlers: dict[EventKind, _Handler] = {
            EventKind.WEBHOOK_TEST: self._on_test,
            EventKind.MESSAGE_RECEIVED: self._on_message_received,
            EventKind.PERSONAL_MESSAGE_RECEIVED: self._on_message_received,
            EventKind.MESSAGE_SENT: self._on_message_sent,
            EventKind.MESSAGE_RECEIPT: self._on_receipt,
            EventKind.SESSION_STATUS: self._on_session_status,
            EventKind.QRCODE_UPDATED: self._on_qrcode,
        }

    async def dispatch(self, incoming: IncomingEvent) -> ForwardOutcome | None:
        """Run the handler for the event kind.

        Returns the forward outcome, or None when no forward was attempted.
        """
        try:
            kind = EventKind(incoming.event)
        except ValueError:
            logger.info("Unhandled event: %s", incoming.event)
            return None
        return await self._handlers[kind](incoming)

    async def _on_test(self, incoming: IncomingEvent) -> None:
        logger.info("Test webhook received: %s", dig(incoming.data, "message"))

    async def _on_message_received(self, incoming: IncomingEvent) -> ForwardOutcome:
        message = normalize_message(incoming.data)
        logger.info("Message received from %s", message.from_)
        return await self._forwarder.forward(
            self._settings.message_webhook_url, message,
        )

    async def _on_message_sent(self, incoming: IncomingEvent) -> None:
        logger.info("Message sent: %s", dig(incoming.data, "key", "id"))

    async def _on_receipt(self, incoming: IncomingEvent) -> None:
        logger.info(
            "Receipt update for %s: %s",
            dig(incoming.data, "key", "id"),
            coalesce(dig(incoming.data, "status"), dig(incoming.data, "receipt")),
        )

    async def _on_session_status(self, incoming: IncomingEvent) -> ForwardOutcome | None:
        status = dig(incoming.data, "status")
        session_id = session_id_of(incoming)
        logger.info("Session %s status: %s", session_id, status)
        if not isinstance(status, str) or status not in DISCONNECTED_STATUSES:
            return None
        alert = DisconnectAlert(session_id=session_id, status=status)
        return await self._forwarder.forward(self._settings.alert_webhook_url, alert)

    async def _on_qrcode(self, incoming: IncomingEvent) -> None:
        logger.info("QR code updated for session %s", session_id_of(incoming))
