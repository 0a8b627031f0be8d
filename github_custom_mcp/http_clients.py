"""Async GitHub HTTP client helpers with lightweight metrics and logging wrappers."""

from __future__ import annotations

import asyncio
import os
import time
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import urlencode

import httpx

from .config import (
    GITHUB_API_BASE,
    GITHUB_API_VERSION,
    GITHUB_TOKEN_ENV_VARS,
    GITHUB_USER_AGENT,
    HTTPX_MAX_CONNECTIONS,
    HTTPX_MAX_KEEPALIVE,
    HTTPX_TIMEOUT,
)
from .exceptions import (
    GitHubAPIError,
    GitHubAuthError,
    GitHubNotFoundError,
    GitHubRateLimitError,
)
from .tool_logging import _build_event, _log_github_request

_http_client_github: Optional[httpx.AsyncClient] = None
_http_client_github_loop: Optional[asyncio.AbstractEventLoop] = None
_http_client_github_token: Optional[str] = None
# Replaced on token rotation; closed at shutdown so in-flight requests finish.
_retired_github_clients: List[httpx.AsyncClient] = []


# ---------------------------------------------------------------------------
# Token helpers
# ---------------------------------------------------------------------------


def _get_github_token() -> str:
    """Return a trimmed GitHub token or raise when missing/empty.

    The environment is read on every call instead of caching a module-level
    constant, so a rotated token is picked up without a restart and tests can
    swap values with ``monkeypatch.setenv``.
    """

    token = None
    token_source = None
    for env_var in GITHUB_TOKEN_ENV_VARS:
        candidate = os.environ.get(env_var)
        if candidate is not None:
            token = candidate
            token_source = env_var
            break

    if token is None:
        raise GitHubAuthError("GitHub authentication failed: token is not configured")

    token = token.strip()
    if not token:
        raise GitHubAuthError(
            f"GitHub authentication failed: {token_source or 'token'} is empty"
        )

    return token


def _get_optional_github_token() -> Optional[str]:
    """Return a trimmed GitHub token or None when missing/empty."""

    try:
        return _get_github_token()
    except GitHubAuthError:
        return None


# ---------------------------------------------------------------------------
# Rate limit helpers
# ---------------------------------------------------------------------------


def _is_rate_limit_response(
    *, resp: httpx.Response, message_lower: str, error_flag: bool
) -> bool:
    if not error_flag:
        return False

    if resp.status_code == 429:
        return True
    if resp.headers.get("X-RateLimit-Remaining") == "0":
        return True
    if "rate limit" in message_lower:
        return True
    if "abuse detection" in message_lower:
        return True
    return False


# ---------------------------------------------------------------------------
# Client factory
# ---------------------------------------------------------------------------


def _active_event_loop() -> asyncio.AbstractEventLoop:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.get_event_loop()


def _refresh_async_client(
    client: Optional[httpx.AsyncClient],
    *,
    client_loop: Optional[asyncio.AbstractEventLoop],
    rebuild: Callable[[], httpx.AsyncClient],
    force_refresh: bool = False,
) -> Tuple[httpx.AsyncClient, asyncio.AbstractEventLoop, Optional[httpx.AsyncClient]]:
    """Return a loop-safe AsyncClient, rebuilding if necessary.

    An AsyncClient's connection pool is bound to the loop it first ran on, so
    a different loop, a closed client, or a token change all get a fresh one.
    The third item is the replaced client when it is still open on this loop;
    requests may still be using it, so the caller owns closing it later.
    """

    loop = _active_event_loop()

    needs_refresh = force_refresh or client is None or client.is_closed
    if not needs_refresh and client_loop is not None and client_loop is not loop:
        needs_refresh = True

    if not needs_refresh:
        return client, client_loop or loop, None

    replaced: Optional[httpx.AsyncClient] = None
    if client is not None and not client.is_closed and client_loop is loop:
        replaced = client

    return rebuild(), loop, replaced


def _github_client_instance() -> httpx.AsyncClient:
    """Shared async client for GitHub API requests.

    Raises GitHubAuthError when no token is configured; nothing goes out
    unauthenticated.
    """

    global _http_client_github, _http_client_github_loop, _http_client_github_token

    current_token = _get_github_token()
    token_changed = current_token != _http_client_github_token

    def _build_client() -> httpx.AsyncClient:
        http_limits = httpx.Limits(
            max_connections=HTTPX_MAX_CONNECTIONS,
            max_keepalive_connections=HTTPX_MAX_KEEPALIVE,
        )
        headers = {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {current_token}",
            "User-Agent": GITHUB_USER_AGENT,
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }
        return httpx.AsyncClient(
            base_url=GITHUB_API_BASE,
            timeout=HTTPX_TIMEOUT,
            limits=http_limits,
            headers=headers,
        )

    _http_client_github, _http_client_github_loop, replaced = _refresh_async_client(
        _http_client_github,
        client_loop=_http_client_github_loop,
        rebuild=_build_client,
        force_refresh=token_changed,
    )
    if replaced is not None:
        _retired_github_clients.append(replaced)
    _http_client_github_token = current_token
    return _http_client_github


async def aclose_github_client() -> None:
    """Close the shared client and every client a token rotation replaced."""

    global _http_client_github, _http_client_github_loop, _http_client_github_token

    clients = [*_retired_github_clients, _http_client_github]
    _retired_github_clients.clear()
    _http_client_github = None
    _http_client_github_loop = None
    _http_client_github_token = None
    for client in clients:
        if client is not None and not client.is_closed:
            await client.aclose()


# ---------------------------------------------------------------------------
# Request helper with metrics
# ---------------------------------------------------------------------------


def _github_api_url_for_logs(path: str, params: Optional[Dict[str, Any]] = None) -> str:
    """Build an absolute GitHub API URL for logging.

    Works even when a request fails before an httpx.Response exists.
    """

    base = GITHUB_API_BASE or "https://api.github.com"
    normalized = path if path.startswith("/") else f"/{path}"
    url = f"{base}{normalized}"
    if params:
        cleaned: Dict[str, Any] = {k: v for k, v in params.items() if v is not None}
        qs = urlencode(cleaned, doseq=True)
        if qs:
            url = f"{url}?{qs}"
    return url


def _error_message_from_body(body: Any) -> str:
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str):
            return message
    return ""


async def _github_request(
    method: str,
    path: str,
    *,
    params: Optional[Dict[str, Any]] = None,
    json_body: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    expect_json: bool = True,
    client_factory: Optional[Callable[[], Any]] = None,
) -> Dict[str, Any]:
    """Issue one GitHub API request and map failures onto typed errors.

    There is no retry: a rate-limited or failed request raises immediately and
    the caller decides what to do.
    """

    client_factory = client_factory or _github_client_instance
    api_url_for_logs = _github_api_url_for_logs(path, params=params)
    start = time.time()

    def _log(**outcome: Any) -> None:
        elapsed_ms = int((time.time() - start) * 1000)
        _log_github_request(_build_event(method, api_url_for_logs, duration_ms=elapsed_ms, **outcome))

    try:
        client = client_factory()
    except GitHubAuthError as exc:
        _log(exc=exc)
        raise

    try:
        resp = await client.request(method, path, params=params, json=json_body, headers=headers)
    except httpx.TimeoutException as exc:
        _log(exc=exc)
        raise
    except httpx.HTTPError as exc:
        _log(exc=exc)
        raise GitHubAPIError(f"GitHub request failed: {exc}") from exc

    error_flag = resp.status_code >= 400

    body: Any = None
    if error_flag or expect_json:
        try:
            body = resp.json()
        except ValueError:
            body = None

    message = _error_message_from_body(body)
    rate_limited = _is_rate_limit_response(resp=resp, message_lower=message.lower(), error_flag=error_flag)
    _log(resp=resp, rate_limited=rate_limited)

    if rate_limited:
        reset_hint = resp.headers.get("Retry-After") or resp.headers.get("X-RateLimit-Reset")
        raise GitHubRateLimitError(
            (
                f"GitHub rate limit exceeded; retry after {reset_hint}"
                if reset_hint
                else "GitHub rate limit exceeded"
            ),
            status_code=resp.status_code,
            retry_after=reset_hint,
        )

    if resp.status_code in (401, 403):
        raise GitHubAuthError(
            f"GitHub authentication failed: {resp.status_code} {message or 'Authentication failed'}",
            status_code=resp.status_code,
        )

    if resp.status_code == 404:
        raise GitHubNotFoundError(
            f"GitHub API error 404: {message or 'Not Found'}",
            status_code=404,
        )

    if error_flag:
        raise GitHubAPIError(
            f"GitHub API error {resp.status_code}: {message or resp.text[:200]}",
            status_code=resp.status_code,
        )

    if expect_json and body is None:
        raise GitHubAPIError(
            f"GitHub returned a non-JSON response for {method} {path}",
            status_code=resp.status_code,
        )

    result: Dict[str, Any] = {
        "status_code": resp.status_code,
        "headers": dict(resp.headers),
        "text": resp.text,
    }
    if expect_json:
        result["json"] = body
    return result


__all__ = [
    "_get_github_token",
    "_get_optional_github_token",
    "_github_client_instance",
    "_github_request",
    "aclose_github_client",
]
