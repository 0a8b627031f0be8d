"""Issue tools.

Tool implementations for the main MCP surface.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from github_custom_mcp.mcp_server.models import ToolCallResult
from github_custom_mcp.utils import _format_date

from ._main import _main


def _label_names(labels: Any) -> List[str]:
    names: List[str] = []
    for label in labels or []:
        # The API returns label objects; older payloads sometimes carry bare strings.
        if isinstance(label, Mapping):
            name = label.get("name")
        else:
            name = label
        if isinstance(name, str) and name:
            names.append(name)
    return names


def _project_issue(item: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "number": item.get("number"),
        "title": item.get("title"),
        "state": item.get("state"),
        "labels": _label_names(item.get("labels")),
        "created_at": item.get("created_at"),
        "updated_at": item.get("updated_at"),
        "html_url": item.get("html_url"),
    }


def _render_issue_line(issue: Mapping[str, Any]) -> str:
    labels = ", ".join(issue["labels"]) or "No labels"
    return (
        f"- **#{issue['number']}**: {issue['title']} [{issue['state']}]\n"
        f"  🏷 {labels}\n"
        f"  📅 Created: {_format_date(issue['created_at'])} | Updated: {_format_date(issue['updated_at'])}\n"
        f"  🔗 {issue['html_url']}"
    )


async def list_issues(
    owner: str,
    repo: str,
    state: str = "open",
    per_page: int = 30,
) -> ToolCallResult:
    """List issues for a repository (the API includes pull requests)."""

    m = _main()

    params = {"state": state, "per_page": int(per_page)}
    data = await m._github_request("GET", f"/repos/{owner}/{repo}/issues", params=params)

    issues = [_project_issue(item) for item in data.get("json") or [] if isinstance(item, Mapping)]

    lines = [f"Found {len(issues)} {state} issues in {owner}/{repo}:"]
    if issues:
        lines.append("")
        lines.extend(_render_issue_line(issue) for issue in issues)
    return ToolCallResult.text_result("\n".join(lines))


async def create_issue(
    owner: str,
    repo: str,
    title: str,
    body: Optional[str] = None,
    labels: Optional[List[str]] = None,
) -> ToolCallResult:
    """Create a GitHub issue in the given repository."""

    m = _main()

    payload: Dict[str, Any] = {"title": title, "labels": list(labels or [])}
    if body is not None:
        payload["body"] = body

    data = await m._github_request(
        "POST",
        f"/repos/{owner}/{repo}/issues",
        json_body=payload,
    )
    issue = data.get("json") or {}

    text = (
        f"✅ Successfully created issue #{issue.get('number')}: \"{issue.get('title', title)}\"\n\n"
        f"🔗 URL: {issue.get('html_url')}\n"
        f"📅 Created: {_format_date(issue.get('created_at'))}"
    )
    return ToolCallResult.text_result(text)
