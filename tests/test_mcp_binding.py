import mcp.types as types
import pytest

import main
from github_custom_mcp.mcp_server.context import _to_mcp_tools, build_mcp_server
from github_custom_mcp.mcp_server.registry import build_default_registry


def test_mcp_tools_mirror_the_catalog():
    tools = _to_mcp_tools(build_default_registry())

    assert [tool.name for tool in tools] == [
        "search_repositories",
        "get_repository",
        "list_issues",
        "create_issue",
        "search_code",
        "get_file_contents",
    ]
    list_issues = tools[2]
    assert list_issues.inputSchema["properties"]["state"]["enum"] == ["open", "closed", "all"]
    assert list_issues.inputSchema["required"] == ["owner", "repo"]


@pytest.mark.asyncio
async def test_list_tools_request_handler() -> None:
    server = build_mcp_server()
    handler = server.request_handlers[types.ListToolsRequest]

    response = await handler(types.ListToolsRequest(method="tools/list"))

    assert [tool.name for tool in response.root.tools][:2] == ["search_repositories", "get_repository"]
    assert len(response.root.tools) == 6


@pytest.mark.asyncio
async def test_call_tool_request_handler_success(fake_github) -> None:
    fake_github.json_data = {"total_count": 0, "items": []}
    server = build_mcp_server()
    handler = server.request_handlers[types.CallToolRequest]

    response = await handler(
        types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(name="search_code", arguments={"query": "x"}),
        )
    )

    assert response.root.isError is False
    assert [block.text for block in response.root.content] == ["Found 0 code results:"]


@pytest.mark.asyncio
async def test_call_tool_request_handler_error_text(fake_github) -> None:
    server = build_mcp_server()
    handler = server.request_handlers[types.CallToolRequest]

    response = await handler(
        types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(name="list_issues", arguments={"owner": "o", "repo": "r", "state": "merged"}),
        )
    )

    assert response.root.isError is True
    text = response.root.content[0].text
    assert text.startswith("Error: Invalid arguments for tool 'list_issues':")
    assert text.endswith("(field=state)")
    assert fake_github.calls == []


@pytest.mark.asyncio
async def test_call_tool_request_handler_unknown_tool(fake_github) -> None:
    server = build_mcp_server()
    handler = server.request_handlers[types.CallToolRequest]

    response = await handler(
        types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(name="delete_repo", arguments={}),
        )
    )

    assert response.root.isError is True
    assert response.root.content[0].text == "Error: Unknown tool: delete_repo"
    assert main._metrics_snapshot()["tools"] == {}
