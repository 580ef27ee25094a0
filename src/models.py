"""Shared Pydantic data models for the WhatsApp webhook relay."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# --- Enums ---


class EventKind(str, Enum):
    WEBHOOK_TEST = "webhook.test"
    MESSAGE_RECEIVED = "messages.received"
    PERSONAL_MESSAGE_RECEIVED = "messages-personal.received"
    MESSAGE_SENT = "message.sent"
    MESSAGE_RECEIPT = "message-receipt.update"
    SESSION_STATUS = "session.status"
    QRCODE_UPDATED = "qrcode.updated"


class ForwardOutcome(str, Enum):
    DELIVERED = "delivered"
    SKIPPED = "skipped"
    FAILED = "failed"


# Session states that trigger a connectivity alert
DISCONNECTED_STATUSES = frozenset({"disconnected", "offline"})


def now_iso() -> str:
    """UTC timestamp with millisecond precision and a trailing Z."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# --- Inbound ---


class IncomingEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    event: str | None = None
    data: Any = None
    timestamp: str | None = None
    session_id: str | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> IncomingEvent:
        """Build from a decoded body, tolerating non-object bodies and odd field types."""
        if not isinstance(payload, dict):
            return cls()

        def _text(key: str) -> str | None:
            value = payload.get(key)
            return value if isinstance(value, str) else None

        return cls(
            event=_text("event"),
            data=payload.get("data"),
            timestamp=_text("timestamp"),
            session_id=_text("session_id"),
        )


# --- Outbound ---


class ForwardRequest(BaseModel):
    """Base for notifications sent to a downstream automation endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    event: str

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class MessageDetails(BaseModel):
    id: Any = None
    text: Any = None
    timestamp: Any = None
    type: Any = "text"


class ContactDetails(BaseModel):
    name: Any = None
    phone: Any = None


class NormalizedMessage(ForwardRequest):
    event: str = "message_received"
    from_: Any = Field(default=None, alias="from")
    to: Any = None
    message: MessageDetails
    contact: ContactDetails
    raw_data: Any = None


class DisconnectAlert(ForwardRequest):
    event: str = "whatsapp_disconnected"
    session_id: str | None = None
    status: str
    timestamp: str = Field(default_factory=now_iso)
