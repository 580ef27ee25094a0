"""Tolerant access to provider payload fields."""

from __future__ import annotations

from typing import Any


def dig(data: Any, *keys: str) -> Any:
    """Walk nested mappings by key, returning None at the first missing step.

    Non-mapping intermediates (lists, strings, None) also yield None.
    """
    current = data
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def coalesce(*values: Any) -> Any:
    """Return the first value that is neither None nor an empty string."""
    for value in values:
        if value is not None and value != "":
            return value
    return None
