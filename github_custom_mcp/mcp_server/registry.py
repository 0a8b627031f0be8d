"""Tool registry and the dispatch boundary.

Every call goes through ``ToolRegistry.call_tool``, which guarantees exactly
one ``ToolCallResult`` back:

- event: tool_call.start | tool_call.ok | tool_call.error
- unknown names short-circuit before any remote call
- handler and validation failures are converted once, here, never in handlers

Console lines stay short; the structured event rides along as a compact JSON
string under ``tool_json``.
"""

from __future__ import annotations

import json
import time
import uuid
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Tuple

from github_custom_mcp.config import TOOLS_LOGGER
from github_custom_mcp.exceptions import UnknownToolError
from github_custom_mcp.main_tools.files import get_file_contents
from github_custom_mcp.main_tools.issues import create_issue, list_issues
from github_custom_mcp.main_tools.querying import search_code
from github_custom_mcp.main_tools.repositories import get_repository, search_repositories
from github_custom_mcp.mcp_server import schemas
from github_custom_mcp.mcp_server.errors import _tool_error_result
from github_custom_mcp.mcp_server.models import ToolCallRequest, ToolCallResult, ToolDescriptor
from github_custom_mcp.metrics import METRICS

ToolHandler = Callable[..., Awaitable[ToolCallResult]]


def _log_tool_event(payload: Mapping[str, Any]) -> None:
    """Emit a single readable console line plus the payload as a JSON string."""

    tool = payload.get("tool_name", "")
    status = payload.get("status", "")
    event = payload.get("event", "tool")
    dur = payload.get("duration_ms")
    dur_s = f" {int(dur)}ms" if isinstance(dur, (int, float)) else ""

    msg = f"[tool] {tool} {status}{dur_s} ({event})"
    tool_json = json.dumps(payload, ensure_ascii=False, sort_keys=True, separators=(",", ":"), default=str)
    extra = {"tool_json": tool_json, "tool_name": tool, "call_id": payload.get("call_id")}

    if status == "error":
        TOOLS_LOGGER.warning(msg, extra=extra)
    else:
        TOOLS_LOGGER.info(msg, extra=extra)


class ToolRegistry:
    """Static catalog of tools keyed by name."""

    def __init__(self) -> None:
        self._tools: Dict[str, Tuple[ToolDescriptor, ToolHandler]] = {}

    def register(self, descriptor: ToolDescriptor, handler: ToolHandler) -> None:
        if descriptor.name in self._tools:
            raise ValueError(f"Tool {descriptor.name!r} is already registered")
        self._tools[descriptor.name] = (descriptor, handler)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def names(self) -> Tuple[str, ...]:
        return tuple(self._tools)

    def get(self, name: str) -> Optional[ToolDescriptor]:
        entry = self._tools.get(name)
        return entry[0] if entry else None

    def list_tools(self) -> Tuple[ToolDescriptor, ...]:
        return tuple(descriptor for descriptor, _ in self._tools.values())

    async def call_tool(self, request: ToolCallRequest) -> ToolCallResult:
        call_id = str(uuid.uuid4())
        start = time.perf_counter()
        arguments = request.arguments or {}

        _log_tool_event(
            {
                "event": "tool_call.start",
                "status": "start",
                "tool_name": request.name,
                "call_id": call_id,
                "arg_keys": sorted(arguments)[:32],
            }
        )

        entry = self._tools.get(request.name)
        try:
            if entry is None:
                raise UnknownToolError(request.name)
            descriptor, handler = entry
            prepared = schemas._prepare_tool_args(descriptor, arguments)
            result = await handler(**prepared)
        except Exception as exc:
            result = _tool_error_result(exc, context=request.name)

        duration_ms = int((time.perf_counter() - start) * 1000)
        if entry is not None:
            category = (result.error or {}).get("category", "unknown") if result.is_error else None
            METRICS.record_tool_call(request.name, duration_ms=duration_ms, error_category=category)

        if result.is_error:
            _log_tool_event(
                {
                    "event": "tool_call.error",
                    "status": "error",
                    "tool_name": request.name,
                    "call_id": call_id,
                    "duration_ms": duration_ms,
                    "error": dict(result.error or {}),
                }
            )
        else:
            _log_tool_event(
                {
                    "event": "tool_call.ok",
                    "status": "ok",
                    "tool_name": request.name,
                    "call_id": call_id,
                    "duration_ms": duration_ms,
                    "result_chars": len(result.text),
                }
            )
        return result


def build_default_registry() -> ToolRegistry:
    registry = ToolRegistry()
    registry.register(schemas.SEARCH_REPOSITORIES, search_repositories)
    registry.register(schemas.GET_REPOSITORY, get_repository)
    registry.register(schemas.LIST_ISSUES, list_issues)
    registry.register(schemas.CREATE_ISSUE, create_issue)
    registry.register(schemas.SEARCH_CODE, search_code)
    registry.register(schemas.GET_FILE_CONTENTS, get_file_contents)
    return registry


REGISTRY = build_default_registry()

__all__ = ["REGISTRY", "ToolHandler", "ToolRegistry", "build_default_registry"]
