"""Best-effort delivery of normalized events to downstream automation webhooks.

A forward is a single POST with a bounded timeout. There is no retry: a
failed forward is logged and reported as FAILED, and the inbound provider
request is acknowledged regardless.
"""

from __future__ import annotations

import logging

import httpx

from src.config import DEFAULT_FORWARD_TIMEOUT_SECONDS
from src.models import ForwardOutcome, ForwardRequest

logger = logging.getLogger(__name__)


class DownstreamForwarder:
    """Posts ForwardRequests as JSON to a configured URL."""

    def __init__(self, timeout: float = DEFAULT_FORWARD_TIMEOUT_SECONDS) -> None:
        self._timeout = timeout

    async def forward(
        self, url: str | None, request: ForwardRequest,
    ) -> ForwardOutcome:
        if not url:
            logger.info("No downstream URL configured for %s, skipping", request.event)
            return ForwardOutcome.SKIPPED

        headers = {"Content-Type": "application/json"}
        try:
            async with httpx.AsyncClient() as client:
                resp = await client.post(
                    url, json=request.to_json(), headers=headers, timeout=self._timeout,
                )
        except httpx.TimeoutException:
            logger.error(
                "Timed out after %.1fs forwarding %s to %s",
                self._timeout, request.event, url,
            )
            return ForwardOutcome.FAILED
        except httpx.HTTPError as exc:
            logger.error("Failed to reach %s for %s: %s", url, request.event, exc)
            return ForwardOutcome.FAILED

        if 200 <= resp.status_code < 300:
            logger.info("Forwarded %s to %s", request.event, url)
            return ForwardOutcome.DELIVERED

        logger.error(
            "Downstream %s answered %s for %s", url, resp.status_code, request.event,
        )
        return ForwardOutcome.FAILED
