"""Configuration and logging helpers for the GitHub MCP server."""

from __future__ import annotations

import logging
import os
import time

# Custom log levels
# ------------------------------------------------------------------------------
#
# DETAILED: verbose operational logging (one line per GitHub request, dropped
# arguments) that is more detailed than INFO but less noisy than full DEBUG.

DETAILED_LEVEL = 15


def _install_custom_log_levels() -> None:
    if not hasattr(logging, "DETAILED"):
        logging.addLevelName(DETAILED_LEVEL, "DETAILED")
        setattr(logging, "DETAILED", DETAILED_LEVEL)

    if not hasattr(logging.Logger, "detailed"):
        def detailed(self: logging.Logger, msg, *args, **kwargs):
            if self.isEnabledFor(DETAILED_LEVEL):
                self._log(DETAILED_LEVEL, msg, args, **kwargs)
        logging.Logger.detailed = detailed  # type: ignore[attr-defined]


def _resolve_log_level(level_name: str | None) -> int:
    if not level_name:
        return logging.INFO

    name = str(level_name).strip().upper()
    if not name:
        return logging.INFO

    # Numeric levels are allowed.
    if name.lstrip("-").isdigit():
        return int(name)

    if name == "DETAILED":
        return DETAILED_LEVEL

    level = getattr(logging, name, logging.INFO)
    return level if isinstance(level, int) else logging.INFO


def _env_int(name: str, default: int) -> int:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_flag(name: str, default: bool = False) -> bool:
    """Return True when an environment variable is set to a truthy value."""

    val = os.environ.get(name)
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "y", "on"}


_install_custom_log_levels()

# Configuration and globals
# ------------------------------------------------------------------------------

SERVER_NAME = "github-custom-mcp-server"
SERVER_VERSION = "1.0.0"

# Checked in order; the first variable that is set wins, even when empty.
GITHUB_TOKEN_ENV_VARS = (
    "GITHUB_PERSONAL_ACCESS_TOKEN",
    "GITHUB_PAT",
    "GITHUB_TOKEN",
)
GITHUB_API_BASE = os.environ.get("GITHUB_API_BASE", "https://api.github.com").rstrip("/")
GITHUB_API_VERSION = os.environ.get("GITHUB_API_VERSION", "2022-11-28")
GITHUB_USER_AGENT = f"{SERVER_NAME}/{SERVER_VERSION}"

HTTPX_TIMEOUT = _env_float("HTTPX_TIMEOUT", 30.0)
HTTPX_MAX_CONNECTIONS = _env_int("HTTPX_MAX_CONNECTIONS", 100)
HTTPX_MAX_KEEPALIVE = _env_int("HTTPX_MAX_KEEPALIVE", 20)

MCP_TRANSPORT = (os.environ.get("MCP_TRANSPORT") or "stdio").strip().lower()
MCP_HOST = (os.environ.get("MCP_HOST") or os.environ.get("HOST") or "127.0.0.1").strip()
MCP_PORT = _env_int("MCP_PORT", _env_int("PORT", 8000))

GITHUB_MCP_DIAGNOSTICS = _env_flag("GITHUB_MCP_DIAGNOSTICS", False)

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
LOG_STYLE = os.environ.get("LOG_STYLE", "color").lower()

# Default to a compact, scannable format.
LOG_FORMAT = os.environ.get(
    "LOG_FORMAT",
    "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)


class _ColorFormatter(logging.Formatter):
    """Level-colored formatter for stderr logs."""

    _C = {
        "DEBUG": "\x1b[36m",  # cyan
        "DETAILED": "\x1b[36m",  # cyan
        "INFO": "\x1b[32m",  # green
        "WARNING": "\x1b[33m",  # yellow
        "ERROR": "\x1b[31m",  # red
        "CRITICAL": "\x1b[35m",  # magenta
        "RESET": "\x1b[0m",
    }

    def __init__(self, fmt: str, *, use_color: bool) -> None:
        super().__init__(fmt)
        self._use_color = bool(use_color)

    def format(self, record: logging.LogRecord) -> str:  # pragma: no cover - formatting
        levelname = record.levelname
        if self._use_color and levelname in self._C:
            record.levelname = f"{self._C[levelname]}{levelname}{self._C['RESET']}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def _configure_logging() -> None:
    # Avoid reconfiguring during module reloads.
    root = logging.getLogger()
    if getattr(root, "_github_custom_mcp_configured", False):
        return

    use_color = LOG_STYLE in {"color", "ansi", "colored"}

    # StreamHandler writes to stderr; stdout carries stdio protocol frames.
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(_ColorFormatter(LOG_FORMAT, use_color=use_color))

    logging.basicConfig(
        level=_resolve_log_level(LOG_LEVEL),
        handlers=[console_handler],
        force=True,
    )

    for noisy in (
        "uvicorn.access",
        "mcp",
        "mcp.server",
        "mcp.server.lowlevel.server",
        "httpx",
        "httpcore",
    ):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    setattr(root, "_github_custom_mcp_configured", True)


_configure_logging()

BASE_LOGGER = logging.getLogger("github_custom_mcp")
GITHUB_LOGGER = logging.getLogger("github_custom_mcp.github_client")
TOOLS_LOGGER = logging.getLogger("github_custom_mcp.tools")

SERVER_START_TIME = time.time()

__all__ = [
    "BASE_LOGGER",
    "DETAILED_LEVEL",
    "GITHUB_API_BASE",
    "GITHUB_API_VERSION",
    "GITHUB_LOGGER",
    "GITHUB_MCP_DIAGNOSTICS",
    "GITHUB_TOKEN_ENV_VARS",
    "GITHUB_USER_AGENT",
    "HTTPX_MAX_CONNECTIONS",
    "HTTPX_MAX_KEEPALIVE",
    "HTTPX_TIMEOUT",
    "LOG_LEVEL",
    "MCP_HOST",
    "MCP_PORT",
    "MCP_TRANSPORT",
    "SERVER_NAME",
    "SERVER_START_TIME",
    "SERVER_VERSION",
    "TOOLS_LOGGER",
]
