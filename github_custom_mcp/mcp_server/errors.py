"""Utilities for producing consistent tool-failure results.

This module is the single place where a failure becomes a result envelope.
The host only ever sees ``Error: <message>``; the structured payload next to
it keeps the exception type, category and HTTP status for logs.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

import httpx
import jsonschema

from github_custom_mcp.config import BASE_LOGGER, GITHUB_MCP_DIAGNOSTICS
from github_custom_mcp.exceptions import (
    GitHubAPIError,
    GitHubAuthError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    ToolInputValidationError,
    UnknownToolError,
)
from github_custom_mcp.mcp_server.models import ToolCallResult


def _summarize_exception(exc: BaseException) -> str:
    """Create a short human-readable message."""
    if isinstance(exc, jsonschema.ValidationError):
        path = list(exc.path)
        base_message = exc.message or exc.__class__.__name__
        if path:
            path_display = " → ".join(str(p) for p in path)
            return f"{base_message} (at {path_display})"
        return base_message

    return str(exc) or exc.__class__.__name__


def _classify_category(exc: BaseException) -> str:
    """Category for logs and in-process callers; never changes the host text."""
    if isinstance(exc, UnknownToolError):
        return "unknown_tool"

    if isinstance(exc, (jsonschema.ValidationError, ToolInputValidationError)):
        return "validation"

    if isinstance(exc, GitHubRateLimitError):
        return "rate_limit"
    if isinstance(exc, GitHubAuthError):
        return "auth"
    if isinstance(exc, GitHubNotFoundError):
        return "not_found"

    if isinstance(exc, (asyncio.TimeoutError, TimeoutError, httpx.TimeoutException)):
        return "timeout"

    if isinstance(exc, GitHubAPIError):
        return "github_api"

    return "unknown"


def _structured_tool_error(exc: BaseException, *, context: str) -> Dict[str, Any]:
    """Build a serializable payload describing a tool failure."""
    message = _summarize_exception(exc)
    category = _classify_category(exc)

    payload: Dict[str, Any] = {
        "error": exc.__class__.__name__,
        "message": message,
        "context": context,
        "category": category,
    }

    status_code: Optional[int] = getattr(exc, "status_code", None)
    if status_code is not None:
        payload["status_code"] = status_code

    retry_after = getattr(exc, "retry_after", None)
    if retry_after:
        payload["retry_after"] = retry_after

    field = getattr(exc, "field", None)
    if field:
        payload["field"] = field

    return payload


def _tool_error_result(exc: BaseException, *, context: str) -> ToolCallResult:
    payload = _structured_tool_error(exc, context=context)

    if GITHUB_MCP_DIAGNOSTICS:
        BASE_LOGGER.error(
            "Tool failure",
            exc_info=(type(exc), exc, exc.__traceback__),
            extra={
                "tool_context": context,
                "tool_error_type": payload["error"],
                "tool_error_message": payload["message"],
                "tool_error_category": payload["category"],
            },
        )

    return ToolCallResult.error_result(f"Error: {payload['message']}", error=payload)


__all__ = ["_structured_tool_error", "_summarize_exception", "_tool_error_result"]
