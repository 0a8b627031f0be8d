"""MCP protocol binding.

The low-level SDK server owns framing and transports; this module only maps
its two request kinds onto the tool registry.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import mcp.types as types
from mcp.server.lowlevel import Server

from github_custom_mcp.config import SERVER_NAME, SERVER_VERSION
from github_custom_mcp.mcp_server.models import ToolCallRequest, ToolCallResult
from github_custom_mcp.mcp_server.registry import REGISTRY, ToolRegistry


class ToolCallFailed(Exception):
    """Carries an error result's text to the SDK, which marks it ``isError``."""

    def __init__(self, result: ToolCallResult) -> None:
        super().__init__(result.text)
        self.result = result


def _to_mcp_tools(registry: ToolRegistry) -> List[types.Tool]:
    tools: List[types.Tool] = []
    for descriptor in registry.list_tools():
        wire = descriptor.to_dict()
        tools.append(
            types.Tool(
                name=wire["name"],
                description=wire["description"],
                inputSchema=wire["inputSchema"],
            )
        )
    return tools


def _to_mcp_content(result: ToolCallResult) -> List[types.TextContent]:
    return [types.TextContent(type="text", text=block.text) for block in result.content]


def build_mcp_server(registry: ToolRegistry = REGISTRY) -> Server:
    server: Server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def _list_tools() -> List[types.Tool]:
        return _to_mcp_tools(registry)

    # The registry validates arguments so every failure renders the same way.
    @server.call_tool(validate_input=False)
    async def _call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> List[types.TextContent]:
        result = await registry.call_tool(ToolCallRequest(name=name, arguments=arguments or {}))
        if result.is_error:
            raise ToolCallFailed(result)
        return _to_mcp_content(result)

    return server


mcp = build_mcp_server()

__all__ = ["ToolCallFailed", "build_mcp_server", "mcp"]
