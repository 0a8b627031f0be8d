"""Process-local counters for tool calls and outbound GitHub requests.

Tool stats are bucketed by tool name and, for failures, by the error category
the dispatch boundary assigned. GitHub stats are bucketed by status class
(``2xx``, ``4xx``, ``5xx``, ``none`` when no response arrived) and keep the
last ``X-RateLimit-Remaining`` value seen. ``/healthz`` exposes the snapshot.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class ToolStats:
    calls: int = 0
    errors: int = 0
    latency_ms_total: int = 0
    error_categories: Counter = field(default_factory=Counter)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "calls": self.calls,
            "errors": self.errors,
            "avg_latency_ms": self.latency_ms_total // self.calls if self.calls else 0,
            "errors_by_category": dict(sorted(self.error_categories.items())),
        }


@dataclass
class GitHubStats:
    requests: int = 0
    failures: int = 0
    rate_limited: int = 0
    timeouts: int = 0
    status_classes: Counter = field(default_factory=Counter)
    rate_limit_remaining: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "requests": self.requests,
            "failures": self.failures,
            "rate_limited": self.rate_limited,
            "timeouts": self.timeouts,
            "by_status_class": dict(sorted(self.status_classes.items())),
            "rate_limit_remaining": self.rate_limit_remaining,
        }


def _status_class(status_code: Optional[int]) -> str:
    if status_code is None:
        return "none"
    return f"{status_code // 100}xx"


class MetricsRegistry:
    def __init__(self) -> None:
        self.tools: Dict[str, ToolStats] = {}
        self.github = GitHubStats()

    def reset(self) -> None:
        self.tools.clear()
        self.github = GitHubStats()

    def record_tool_call(self, tool_name: str, *, duration_ms: int, error_category: Optional[str]) -> None:
        """Count one dispatched call; ``error_category`` is None on success."""

        stats = self.tools.setdefault(tool_name, ToolStats())
        stats.calls += 1
        stats.latency_ms_total += max(0, int(duration_ms))
        if error_category is not None:
            stats.errors += 1
            stats.error_categories[error_category] += 1

    def record_github_request(
        self,
        *,
        status_code: Optional[int],
        failed: bool,
        rate_limited: bool = False,
        timed_out: bool = False,
        rate_limit_remaining: Optional[int] = None,
    ) -> None:
        stats = self.github
        stats.requests += 1
        stats.status_classes[_status_class(status_code)] += 1
        if failed:
            stats.failures += 1
        if rate_limited:
            stats.rate_limited += 1
        if timed_out:
            stats.timeouts += 1
        if rate_limit_remaining is not None:
            stats.rate_limit_remaining = rate_limit_remaining

    def snapshot(self) -> Dict[str, Any]:
        return {
            "tools": {name: stats.to_dict() for name, stats in self.tools.items()},
            "github": self.github.to_dict(),
        }


METRICS = MetricsRegistry()


def _metrics_snapshot() -> Dict[str, Any]:
    return METRICS.snapshot()


def _reset_metrics_for_tests() -> None:
    METRICS.reset()


__all__ = [
    "GitHubStats",
    "METRICS",
    "MetricsRegistry",
    "ToolStats",
    "_metrics_snapshot",
    "_reset_metrics_for_tests",
]
