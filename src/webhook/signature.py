"""HMAC-SHA256 verification of provider webhook bodies.

The provider signs the JSON body with a shared secret and sends the hex
digest in the ``x-webhook-signature`` header. Verification only runs when
both the secret and the header are present.
"""

from __future__ import annotations

import hashlib
import hmac
import json
from enum import Enum
from typing import Any

SIGNATURE_HEADER = "x-webhook-signature"


class SignatureCheckError(Exception):
    """Raised when the expected digest cannot be computed."""


class SignatureStatus(str, Enum):
    VALID = "valid"
    INVALID = "invalid"
    SKIPPED = "skipped"


def serialize_body(body: Any) -> bytes:
    """Bytes the signature covers.

    Raw bodies are signed as received; decoded bodies are re-serialized
    compactly with non-ASCII characters left unescaped.
    """
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode()
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False).encode()


def compute_signature(secret: str, body: Any) -> str:
    """Hex HMAC-SHA256 of the serialized body keyed with the shared secret."""
    try:
        payload = serialize_body(body)
        return hmac.new(secret.encode(), payload, hashlib.sha256).hexdigest()
    except (TypeError, ValueError, RecursionError) as exc:
        raise SignatureCheckError(str(exc)) from exc


class SignatureVerifier:
    """Checks the signature header against the shared secret."""

    def __init__(self, secret: str | None) -> None:
        self._secret = secret

    def verify(self, signature: str | None, body: Any) -> SignatureStatus:
        if not self._secret or not signature:
            return SignatureStatus.SKIPPED

        expected = compute_signature(self._secret, body)
        if hmac.compare_digest(expected.encode(), signature.encode()):
            return SignatureStatus.VALID
        return SignatureStatus.INVALID
