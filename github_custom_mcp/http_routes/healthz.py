from __future__ import annotations

import platform
import sys
import time
from collections.abc import Callable
from typing import Any

from starlette.requests import Request
from starlette.responses import JSONResponse

from github_custom_mcp.config import SERVER_NAME, SERVER_START_TIME, SERVER_VERSION
from github_custom_mcp.http_clients import _get_optional_github_token
from github_custom_mcp.mcp_server.registry import REGISTRY
from github_custom_mcp.metrics import _metrics_snapshot


def _github_token_present() -> bool:
    return _get_optional_github_token() is not None


def _build_health_payload() -> dict[str, Any]:
    github_token_present = _github_token_present()
    uptime_seconds = max(0, int(time.time() - SERVER_START_TIME))

    return {
        "status": "ok" if github_token_present else "degraded",
        "server": {"name": SERVER_NAME, "version": SERVER_VERSION},
        "uptime_seconds": uptime_seconds,
        "github_token_present": github_token_present,
        "tools": list(REGISTRY.names()),
        "metrics": _metrics_snapshot(),
        "runtime": {
            "python": sys.version.split()[0],
            "platform": platform.platform(),
        },
    }


def build_healthz_endpoint() -> Callable[[Request], Any]:
    async def _endpoint(_: Request) -> JSONResponse:
        return JSONResponse(_build_health_payload())

    return _endpoint


def register_healthz_route(app: Any) -> None:
    """Register the /healthz route on the ASGI app."""

    app.add_route("/healthz", build_healthz_endpoint(), methods=["GET"])


__all__ = ["register_healthz_route"]
