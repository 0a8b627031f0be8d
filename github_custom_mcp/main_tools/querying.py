"""Code search tool."""

from __future__ import annotations

from typing import Any, Dict, Mapping

from github_custom_mcp.mcp_server.models import ToolCallResult

from ._main import _main


def _project_code_result(item: Mapping[str, Any]) -> Dict[str, Any]:
    repository = item.get("repository")
    return {
        "name": item.get("name"),
        "path": item.get("path"),
        "repository": repository.get("full_name") if isinstance(repository, Mapping) else None,
        "html_url": item.get("html_url"),
        "score": item.get("score"),
    }


async def search_code(query: str, sort: str = "indexed", per_page: int = 30) -> ToolCallResult:
    """Search code across GitHub repositories."""

    m = _main()

    params = {"q": query, "sort": sort, "per_page": int(per_page)}
    data = await m._github_request("GET", "/search/code", params=params)

    body = data.get("json") or {}
    results = [_project_code_result(item) for item in body.get("items") or [] if isinstance(item, Mapping)]

    lines = [f"Found {len(results)} code results:"]
    if results:
        lines.append("")
    for result in results:
        lines.append(
            f"- **{result['repository']}/{result['path']}**\n"
            f"  📄 {result['name']}\n"
            f"  🔗 {result['html_url']}\n"
            f"  🎯 Score: {result['score']}"
        )
    return ToolCallResult.text_result("\n".join(lines))
