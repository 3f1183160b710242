"""Helpers for reading loosely typed JSON objects."""

from __future__ import annotations

from typing import Any, Mapping


def text(data: Mapping[str, Any], key: str) -> str:
    """Return data[key] as a string, or "" when missing or null."""
    value = data.get(key)
    if value is None:
        return ""
    return str(value)


def nested(data: Mapping[str, Any], key: str) -> Mapping[str, Any] | None:
    """Return data[key] if it is a non-empty JSON object."""
    value = data.get(key)
    if isinstance(value, dict) and value:
        return value
    return None
