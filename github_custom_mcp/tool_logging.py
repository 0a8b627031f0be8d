"""Per-request log lines for outbound GitHub calls.

Every request the client sends becomes one ``GitHubRequestEvent``: logged as a
single DETAILED line on ``github_custom_mcp.github_client`` and counted in the
metrics registry. When the API path has a github.com page (a repository, its
issues, a file, or a search) the line ends with that link.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional
from urllib.parse import parse_qs, urlencode, urlparse

import httpx

from github_custom_mcp.config import GITHUB_LOGGER
from github_custom_mcp.metrics import METRICS

_SEARCH_TYPES = {"repositories": "repositories", "code": "code"}


def _web_url_for_api_path(path: str, query: str = "") -> Optional[str]:
    """github.com page for the API paths this server calls, else None."""

    parts = [p for p in path.split("/") if p]
    params = parse_qs(query)

    if len(parts) == 2 and parts[0] == "search" and parts[1] in _SEARCH_TYPES:
        q = params.get("q", [""])[0]
        return "https://github.com/search?" + urlencode({"q": q, "type": _SEARCH_TYPES[parts[1]]})

    if len(parts) < 3 or parts[0] != "repos":
        return None
    repo_url = f"https://github.com/{parts[1]}/{parts[2]}"
    rest = parts[3:]

    if not rest:
        return repo_url
    if rest == ["issues"]:
        state = params.get("state", ["open"])[0]
        if state == "all":
            return f"{repo_url}/issues"
        return f"{repo_url}/issues?" + urlencode({"q": f"is:issue is:{state}"})
    if rest[0] == "contents":
        ref = params.get("ref", ["main"])[0]
        return f"{repo_url}/tree/{ref}/" + "/".join(rest[1:])
    return repo_url


@dataclass(frozen=True)
class GitHubRequestEvent:
    method: str
    path: str
    status_code: Optional[int]
    duration_ms: int
    failed: bool
    rate_limited: bool = False
    timed_out: bool = False
    rate_limit_remaining: Optional[int] = None
    exc_type: Optional[str] = None
    query: str = ""

    @property
    def web_url(self) -> Optional[str]:
        return _web_url_for_api_path(self.path, self.query)

    def summary(self) -> str:
        target = f"{self.path}?{self.query}" if self.query else self.path
        outcome = str(self.status_code) if self.status_code is not None else (self.exc_type or "ERR")
        line = f"GitHub API {self.method} {target} -> {outcome} ({self.duration_ms}ms)"
        if self.rate_limited:
            line += " rate-limited"
        if self.web_url:
            # Trailing marker keeps log viewers from gluing punctuation onto the link.
            line += f" | web: {self.web_url} [web]"
        return line


def _rate_limit_remaining(resp: Optional[httpx.Response]) -> Optional[int]:
    if resp is None:
        return None
    raw = resp.headers.get("X-RateLimit-Remaining")
    try:
        return int(raw) if raw is not None else None
    except ValueError:
        return None


def _build_event(
    method: str,
    url: str,
    *,
    duration_ms: int,
    resp: Optional[httpx.Response] = None,
    exc: Optional[BaseException] = None,
    rate_limited: bool = False,
) -> GitHubRequestEvent:
    parsed = urlparse(url)
    status_code = resp.status_code if resp is not None else None
    return GitHubRequestEvent(
        method=method,
        path=parsed.path or "/",
        query=parsed.query,
        status_code=status_code,
        duration_ms=max(0, int(duration_ms)),
        failed=exc is not None or (status_code is not None and status_code >= 400),
        rate_limited=rate_limited,
        timed_out=isinstance(exc, httpx.TimeoutException),
        rate_limit_remaining=_rate_limit_remaining(resp),
        exc_type=exc.__class__.__name__ if exc is not None else None,
    )


def _log_github_request(event: GitHubRequestEvent) -> None:
    GITHUB_LOGGER.detailed(  # type: ignore[attr-defined]
        event.summary(), extra={"github_request": asdict(event), "web_url": event.web_url}
    )
    METRICS.record_github_request(
        status_code=event.status_code,
        failed=event.failed,
        rate_limited=event.rate_limited,
        timed_out=event.timed_out,
        rate_limit_remaining=event.rate_limit_remaining,
    )


__all__ = ["GitHubRequestEvent", "_build_event", "_log_github_request"]
