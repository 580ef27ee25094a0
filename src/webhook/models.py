"""Data models for the webhook handler."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class WebhookResponse:
    """Status and JSON body to return to the provider."""

    status_code: int
    content: dict[str, Any] = field(default_factory=dict)
