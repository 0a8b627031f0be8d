"""File and directory retrieval."""

from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import quote

from github_custom_mcp.github_content import (
    _decode_file_payload,
    _directory_entries,
    _is_directory_listing,
)
from github_custom_mcp.mcp_server.models import ToolCallResult

from ._main import _main


def _render_entry(entry: Mapping[str, Any]) -> str:
    line = f"- **{entry['name']}** ({entry['type']})"
    if entry.get("size"):
        line += f" - {entry['size']} bytes"
    return line


async def get_file_contents(owner: str, repo: str, path: str, ref: str = "main") -> ToolCallResult:
    """Return a decoded file, or a listing when ``path`` is a directory."""

    m = _main()

    encoded_path = quote(path.strip("/"), safe="/")
    data = await m._github_request(
        "GET",
        f"/repos/{owner}/{repo}/contents/{encoded_path}",
        params={"ref": ref},
    )
    payload = data.get("json")
    location = f"{owner}/{repo}/{path}"

    if _is_directory_listing(payload):
        entries = _directory_entries(payload)
        lines = [f"Directory contents for {location}:"]
        if entries:
            lines.append("")
            lines.extend(_render_entry(entry) for entry in entries)
        return ToolCallResult.text_result("\n".join(lines))

    text = _decode_file_payload(payload)
    return ToolCallResult.text_result(f"File: {location}\n\n```\n{text}\n```")
