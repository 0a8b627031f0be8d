"""Helpers for interpreting GitHub repository content payloads."""

from __future__ import annotations

import base64
import binascii
from typing import Any, Dict, List, Mapping

from .exceptions import GitHubAPIError


def _is_directory_listing(payload: Any) -> bool:
    """The contents endpoint returns a JSON array for directories."""

    return isinstance(payload, list)


def _directory_entries(payload: List[Any]) -> List[Dict[str, Any]]:
    entries: List[Dict[str, Any]] = []
    for item in payload:
        if not isinstance(item, Mapping):
            continue
        entries.append(
            {
                "name": item.get("name"),
                "type": item.get("type"),
                "path": item.get("path"),
                "size": item.get("size"),
                "download_url": item.get("download_url"),
            }
        )
    return entries


def _decode_file_payload(payload: Any) -> str:
    """Decode a single-file contents payload into text.

    GitHub wraps base64 at 60 columns, which ``b64decode`` tolerates once
    newlines are stripped. Bytes that are not valid UTF-8 come back with
    replacement characters rather than failing the call.
    """

    if not isinstance(payload, Mapping):
        raise GitHubAPIError("Unexpected content response shape from GitHub")

    content = payload.get("content")
    encoding = payload.get("encoding")
    if not isinstance(content, str) or encoding != "base64":
        kind = payload.get("type") or "entry"
        raise GitHubAPIError(
            f"GitHub did not return inline content for this {kind} (encoding={encoding!r})"
        )

    try:
        decoded = base64.b64decode(content.replace("\n", ""), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise GitHubAPIError("Failed to decode GitHub content") from exc

    return decoded.decode("utf-8", errors="replace")


__all__ = [
    "_decode_file_payload",
    "_directory_entries",
    "_is_directory_listing",
]
