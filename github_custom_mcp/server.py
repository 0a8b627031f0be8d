"""Shared server setup for the GitHub MCP.

This module is the stable public import surface.
Implementation lives under `github_custom_mcp.mcp_server.*`.
"""

from __future__ import annotations

from github_custom_mcp.http_clients import _github_request
from github_custom_mcp.mcp_server.context import ToolCallFailed, build_mcp_server, mcp
from github_custom_mcp.mcp_server.errors import _structured_tool_error, _tool_error_result
from github_custom_mcp.mcp_server.models import (
    TextContent,
    ToolCallRequest,
    ToolCallResult,
    ToolDescriptor,
)
from github_custom_mcp.mcp_server.registry import REGISTRY, ToolRegistry, build_default_registry

__all__ = [
    "REGISTRY",
    "TextContent",
    "ToolCallFailed",
    "ToolCallRequest",
    "ToolCallResult",
    "ToolDescriptor",
    "ToolRegistry",
    "_github_request",
    "_structured_tool_error",
    "_tool_error_result",
    "build_default_registry",
    "build_mcp_server",
    "mcp",
]
