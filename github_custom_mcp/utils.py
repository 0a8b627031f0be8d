"""Utility helpers shared by GitHub MCP tools."""

from __future__ import annotations

from datetime import datetime
from typing import Any


def _format_date(timestamp: Any) -> str:
    """Render a GitHub ISO-8601 timestamp as ``YYYY-MM-DD``."""

    if not isinstance(timestamp, str) or not timestamp.strip():
        return "Unknown"
    try:
        parsed = datetime.fromisoformat(timestamp.strip().replace("Z", "+00:00"))
    except ValueError:
        return timestamp
    return parsed.date().isoformat()


def _text_or(value: Any, fallback: str) -> str:
    if value is None:
        return fallback
    text = str(value).strip()
    return text or fallback


__all__ = ["_format_date", "_text_or"]
