"""Repository search and lookup tools."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

from github_custom_mcp.mcp_server.models import ToolCallResult
from github_custom_mcp.utils import _format_date, _text_or

from ._main import _main


def _project_repository(item: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "name": item.get("name"),
        "full_name": item.get("full_name"),
        "description": item.get("description"),
        "html_url": item.get("html_url"),
        "stars": item.get("stargazers_count", 0),
        "forks": item.get("forks_count", 0),
        "language": item.get("language"),
        "updated_at": item.get("updated_at"),
    }


def _render_repository_line(repo: Mapping[str, Any]) -> str:
    return (
        f"- **{repo['full_name']}**: {_text_or(repo['description'], 'No description')}\n"
        f"  ⭐ {repo['stars']} stars | 🍴 {repo['forks']} forks"
        f" | 🗣 {_text_or(repo['language'], 'Unknown')}"
        f" | 📅 {_format_date(repo['updated_at'])}\n"
        f"  🔗 {repo['html_url']}"
    )


async def search_repositories(query: str, sort: str = "stars", per_page: int = 30) -> ToolCallResult:
    """Search GitHub repositories and list the matches."""

    m = _main()

    params = {"q": query, "sort": sort, "per_page": int(per_page)}
    data = await m._github_request("GET", "/search/repositories", params=params)

    body = data.get("json") or {}
    repositories: List[Dict[str, Any]] = [
        _project_repository(item) for item in body.get("items") or [] if isinstance(item, Mapping)
    ]

    lines = [f"Found {len(repositories)} repositories:"]
    if repositories:
        lines.append("")
        lines.extend(_render_repository_line(repo) for repo in repositories)
    return ToolCallResult.text_result("\n".join(lines))


async def get_repository(owner: str, repo: str) -> ToolCallResult:
    """Fetch one repository and summarize it."""

    m = _main()

    data = await m._github_request("GET", f"/repos/{owner}/{repo}")
    repository = data.get("json") or {}

    text = (
        f"**{repository.get('full_name') or f'{owner}/{repo}'}**\n\n"
        f"📝 {_text_or(repository.get('description'), 'No description')}\n"
        f"⭐ {repository.get('stargazers_count', 0)} stars\n"
        f"🍴 {repository.get('forks_count', 0)} forks\n"
        f"👀 {repository.get('watchers_count', 0)} watchers\n"
        f"📅 Created: {_format_date(repository.get('created_at'))}\n"
        f"🔄 Updated: {_format_date(repository.get('updated_at'))}\n"
        f"🗣 Language: {_text_or(repository.get('language'), 'Unknown')}\n"
        f"🔗 URL: {repository.get('html_url')}"
    )
    return ToolCallResult.text_result(text)
