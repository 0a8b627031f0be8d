"""GitHub MCP server exposing a small, fixed set of GitHub tools.

This module is the entry point. It re-exports the tool functions and the
GitHub request helper (tests monkeypatch ``main._github_request``; tool
implementations resolve it through this module at call time), and builds the
ASGI app used for the SSE transport.

Transports:
- stdio: ``python cli.py serve`` (default) or ``anyio.run(main.run_stdio)``
- sse: ``python cli.py serve --transport sse`` or ``uvicorn main:app``
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional

from mcp.server.sse import SseServerTransport
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Mount, Route

import github_custom_mcp.server as server
from github_custom_mcp.config import BASE_LOGGER, SERVER_NAME, SERVER_VERSION  # noqa: F401
from github_custom_mcp.exceptions import (  # noqa: F401
    GitHubAPIError,
    GitHubAuthError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    ToolInputValidationError,
    UnknownToolError,
)
from github_custom_mcp.http_clients import (  # noqa: F401
    _get_github_token,
    _github_client_instance,
    _github_request,
    aclose_github_client,
)
from github_custom_mcp.http_routes.healthz import register_healthz_route
from github_custom_mcp.main_tools.files import get_file_contents  # noqa: F401
from github_custom_mcp.main_tools.issues import create_issue, list_issues  # noqa: F401
from github_custom_mcp.main_tools.querying import search_code  # noqa: F401
from github_custom_mcp.main_tools.repositories import (  # noqa: F401
    get_repository,
    search_repositories,
)
from github_custom_mcp.metrics import (  # noqa: F401
    METRICS,
    _metrics_snapshot,
    _reset_metrics_for_tests,
)
from github_custom_mcp.server import REGISTRY, ToolCallRequest, ToolCallResult


def list_tools() -> List[Dict[str, Any]]:
    """Return the tool catalog in wire shape."""

    return [descriptor.to_dict() for descriptor in REGISTRY.list_tools()]


async def call_tool(name: str, arguments: Optional[Mapping[str, Any]] = None) -> ToolCallResult:
    """Dispatch one tool call; always returns a result envelope."""

    return await REGISTRY.call_tool(ToolCallRequest(name=name, arguments=dict(arguments or {})))


async def run_stdio() -> None:
    """Serve MCP over stdin/stdout until the host closes the stream."""

    from mcp.server.stdio import stdio_server

    async with stdio_server() as (read_stream, write_stream):
        BASE_LOGGER.info("GitHub MCP Server running on stdio")
        try:
            await server.mcp.run(
                read_stream,
                write_stream,
                server.mcp.create_initialization_options(),
            )
        finally:
            await aclose_github_client()


# SSE transport: clients GET /sse for the event stream and POST frames to
# /messages/?session_id=...
sse_transport = SseServerTransport("/messages/")


async def _handle_sse(request: Request) -> Response:
    async with sse_transport.connect_sse(
        request.scope, request.receive, request._send
    ) as (read_stream, write_stream):
        await server.mcp.run(
            read_stream,
            write_stream,
            server.mcp.create_initialization_options(),
        )
    return Response()


@asynccontextmanager
async def _lifespan(_: Starlette) -> AsyncIterator[None]:
    BASE_LOGGER.info("GitHub MCP Server running on sse")
    try:
        yield
    finally:
        await aclose_github_client()


app = Starlette(
    routes=[
        Route("/sse", endpoint=_handle_sse, methods=["GET"]),
        Mount("/messages/", app=sse_transport.handle_post_message),
    ],
    lifespan=_lifespan,
)
register_healthz_route(app)
