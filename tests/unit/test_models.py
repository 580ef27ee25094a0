"""Tests for inbound and outbound data models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

import pytest

from src.models import (
    ContactDetails,
    DisconnectAlert,
    EventKind,
    IncomingEvent,
    MessageDetails,
    NormalizedMessage,
    now_iso,
)


class TestIncomingEvent:
    def test_from_payload(self) -> None:
        incoming = IncomingEvent.from_payload({
            "event": "session.status",
            "data": {"status": "offline"},
            "timestamp": "2026-01-01T00:00:00Z",
            "session_id": "default",
        })
        assert incoming.event == "session.status"
        assert incoming.data == {"status": "offline"}
        assert incoming.timestamp == "2026-01-01T00:00:00Z"
        assert incoming.session_id == "default"

    @pytest.mark.parametrize("payload", [None, [], "text", 3])
    def test_non_object_payload_is_empty(self, payload: Any) -> None:
        incoming = IncomingEvent.from_payload(payload)
        assert incoming.event is None
        assert incoming.data is None

    def test_non_string_fields_dropped(self) -> None:
        incoming = IncomingEvent.from_payload({"event": 1, "session_id": {"id": 2}, "data": []})
        assert incoming.event is None
        assert incoming.session_id is None
        assert incoming.data == []


class TestEventKind:
    def test_values_match_provider_names(self) -> None:
        assert EventKind("messages.received") is EventKind.MESSAGE_RECEIVED
        assert EventKind("messages-personal.received") is EventKind.PERSONAL_MESSAGE_RECEIVED
        assert EventKind("message-receipt.update") is EventKind.MESSAGE_RECEIPT


class TestForwardRequests:
    def test_message_serialization(self) -> None:
        message = NormalizedMessage(
            from_="123",
            to="456",
            message=MessageDetails(id="m1", text="hi", timestamp=1, type="text"),
            contact=ContactDetails(name="Bob", phone="123"),
            raw_data={"from": "123"},
        )
        assert message.to_json() == {
            "event": "message_received",
            "from": "123",
            "to": "456",
            "message": {"id": "m1", "text": "hi", "timestamp": 1, "type": "text"},
            "contact": {"name": "Bob", "phone": "123"},
            "raw_data": {"from": "123"},
        }

    def test_message_accepts_wire_alias(self) -> None:
        message = NormalizedMessage.model_validate({
            "from": "123", "message": {}, "contact": {},
        })
        assert message.from_ == "123"

    def test_alert_defaults(self) -> None:
        alert = DisconnectAlert(status="offline")
        body = alert.to_json()
        assert body["event"] == "whatsapp_disconnected"
        assert body["session_id"] is None
        assert body["status"] == "offline"
        assert body["timestamp"].endswith("Z")


def test_now_iso_is_parseable_utc() -> None:
    stamp = now_iso()
    parsed = datetime.fromisoformat(stamp.replace("Z", "+00:00"))
    assert parsed.utcoffset() is not None
    assert parsed.utcoffset().total_seconds() == 0
