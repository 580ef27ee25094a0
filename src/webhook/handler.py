"""WhatsApp provider webhook handler.

Stages, in order:
1. Admission (method check, GET liveness probe)
2. Body decoding
3. Signature verification (when a secret and header are both present)
4. Event dispatch and forwarding
5. Acknowledgment

Once the signature check passes, the provider always receives a 200:
unexpected errors are logged and acknowledged with ``success: false`` so the
provider does not retry.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from src.config import WebhookSettings
from src.models import IncomingEvent, now_iso
from src.webhook.events import EventRouter, session_id_of
from src.webhook.forwarder import DownstreamForwarder
from src.webhook.models import WebhookResponse
from src.webhook.signature import (
    SIGNATURE_HEADER,
    SignatureCheckError,
    SignatureStatus,
    SignatureVerifier,
)

logger = logging.getLogger(__name__)

LIVENESS_BODY = {"status": "ok", "service": "whatsapp-webhook"}
ACK_ERROR_MESSAGE = "Error logged, webhook acknowledged"


class InvalidJSONError(ValueError):
    """Raised when a raw request body is not valid JSON."""


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are not JSON
    raise ValueError(f"Invalid constant {name}")


def decode_body(body: Any) -> Any:
    """Decode a raw body; already-decoded structures pass through."""
    if body is None:
        return {}
    if isinstance(body, bytes):
        if not body.strip():
            return {}
        try:
            body = body.decode()
        except UnicodeDecodeError as exc:
            raise InvalidJSONError(str(exc)) from exc
    if isinstance(body, str):
        if not body.strip():
            return {}
        try:
            return json.loads(body, parse_constant=_reject_constant)
        except (ValueError, RecursionError) as exc:
            raise InvalidJSONError(str(exc)) from exc
    return body


class WebhookHandler:
    """Handles one provider webhook request end to end."""

    def __init__(
        self,
        settings: WebhookSettings,
        forwarder: DownstreamForwarder | None = None,
    ) -> None:
        self._verifier = SignatureVerifier(settings.webhook_secret)
        self._router = EventRouter(
            settings, forwarder or DownstreamForwarder(settings.forward_timeout),
        )

    async def handle(
        self, method: str, headers: Mapping[str, str], body: Any,
    ) -> WebhookResponse:
        method = method.upper()
        if method == "GET":
            return WebhookResponse(200, dict(LIVENESS_BODY))
        if method != "POST":
            return WebhookResponse(405, {"error": "Method Not Allowed"})

        try:
            payload = decode_body(body)
        except InvalidJSONError as exc:
            logger.warning("Rejected webhook with invalid JSON: %s", exc)
            return WebhookResponse(400, {"error": "Invalid JSON"})

        incoming = IncomingEvent.from_payload(payload)
        logger.info("Incoming WhatsApp webhook: event=%s", incoming.event)

        lowered = {k.lower(): v for k, v in headers.items()}
        try:
            status = self._verifier.verify(lowered.get(SIGNATURE_HEADER), body)
        except SignatureCheckError as exc:
            logger.error("Signature check failed: %s", exc)
            return WebhookResponse(500, {"error": "Signature check failed"})
        if status is SignatureStatus.INVALID:
            logger.warning("Invalid signature for event=%s", incoming.event)
            return WebhookResponse(401, {"error": "Invalid signature"})

        try:
            outcome = await self._router.dispatch(incoming)
        except Exception as exc:  # acknowledge anyway so the provider does not retry
            logger.exception("Error handling webhook event=%s", incoming.event)
            return WebhookResponse(200, {
                "success": False,
                "error": str(exc),
                "message": ACK_ERROR_MESSAGE,
                "timestamp": now_iso(),
            })

        logger.info(
            "Processed event=%s forward=%s",
            incoming.event, outcome.value if outcome else "none",
        )
        content: dict[str, Any] = {
            "success": True,
            "event": incoming.event or "unknown",
        }
        session_id = session_id_of(incoming)
        if session_id:
            content["session_id"] = session_id
        content["received_at"] = now_iso()
        return WebhookResponse(200, content)
