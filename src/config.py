"""Process-wide configuration loaded from environment variables."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

DEFAULT_FORWARD_TIMEOUT_SECONDS = 10.0


class WebhookSettings(BaseModel):
    """Read-only settings shared by every request."""

    model_config = ConfigDict(frozen=True)

    webhook_secret: str | None = None
    message_webhook_url: str | None = None
    alert_webhook_url: str | None = None
    forward_timeout: float = Field(default=DEFAULT_FORWARD_TIMEOUT_SECONDS, gt=0)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> WebhookSettings:
        """Create settings from environment variables; empty values count as unset."""
        env = os.environ if environ is None else environ

        def _optional(name: str) -> str | None:
            value = env.get(name, "").strip()
            return value or None

        raw_timeout = env.get("WEBHOOK_FORWARD_TIMEOUT_SECONDS", "").strip()
        timeout = DEFAULT_FORWARD_TIMEOUT_SECONDS
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                logger.warning(
                    "Ignoring invalid WEBHOOK_FORWARD_TIMEOUT_SECONDS=%r", raw_timeout,
                )
            if not timeout > 0:
                logger.warning("Forward timeout must be positive, using default")
                timeout = DEFAULT_FORWARD_TIMEOUT_SECONDS

        log_level = (_optional("LOG_LEVEL") or "INFO").upper()
        if log_level not in logging.getLevelNamesMapping():
            logger.warning("Unknown LOG_LEVEL=%r, using INFO", log_level)
            log_level = "INFO"

        return cls(
            webhook_secret=_optional("WHATSAPP_WEBHOOK_SECRET"),
            message_webhook_url=_optional("N8N_WHATSAPP_MESSAGE_WEBHOOK_URL"),
            alert_webhook_url=_optional("N8N_ALERT_WEBHOOK_URL"),
            forward_timeout=timeout,
            log_level=log_level,
        )
