import asyncio

import httpx
import jsonschema
import pytest

import main
from github_custom_mcp.mcp_server.errors import (
    _structured_tool_error,
    _summarize_exception,
    _tool_error_result,
)


@pytest.mark.parametrize(
    "exc, category",
    [
        (main.UnknownToolError("nope"), "unknown_tool"),
        (main.ToolInputValidationError("t", "bad"), "validation"),
        (jsonschema.ValidationError("bad"), "validation"),
        (main.GitHubRateLimitError("slow down", status_code=429), "rate_limit"),
        (main.GitHubAuthError("denied", status_code=401), "auth"),
        (main.GitHubNotFoundError("missing", status_code=404), "not_found"),
        (httpx.ReadTimeout("slow"), "timeout"),
        (asyncio.TimeoutError(), "timeout"),
        (main.GitHubAPIError("boom", status_code=500), "github_api"),
        (RuntimeError("surprise"), "unknown"),
    ],
)
def test_categories(exc, category):
    assert _structured_tool_error(exc, context="t")["category"] == category


def test_payload_carries_status_retry_and_field():
    payload = _structured_tool_error(
        main.GitHubRateLimitError("GitHub rate limit exceeded", status_code=429, retry_after="60"),
        context="search_code",
    )

    assert payload == {
        "error": "GitHubRateLimitError",
        "message": "GitHub rate limit exceeded",
        "context": "search_code",
        "category": "rate_limit",
        "status_code": 429,
        "retry_after": "60",
    }

    payload = _structured_tool_error(
        main.ToolInputValidationError("list_issues", "'x' is not valid", field="state"),
        context="list_issues",
    )
    assert payload["field"] == "state"
    assert "status_code" not in payload


def test_summarize_falls_back_to_class_name():
    assert _summarize_exception(RuntimeError()) == "RuntimeError"


def test_summarize_jsonschema_error_includes_path():
    err = jsonschema.ValidationError("'x' is not one of ['open']", path=["state"])
    assert _summarize_exception(err) == "'x' is not one of ['open'] (at state)"


def test_error_result_text_is_single_flat_line():
    result = _tool_error_result(main.GitHubAPIError("GitHub API error 500: oops"), context="get_repository")

    assert result.is_error is True
    assert result.text == "Error: GitHub API error 500: oops"
    assert len(result.content) == 1
    assert result.to_dict() == {
        "content": [{"type": "text", "text": "Error: GitHub API error 500: oops"}],
        "isError": True,
    }


@pytest.mark.asyncio
async def test_error_event_is_logged_as_warning(fake_github, caplog) -> None:
    fake_github.exc = main.GitHubNotFoundError("GitHub API error 404: Not Found", status_code=404)
    caplog.set_level("INFO", logger="github_custom_mcp.tools")

    await main.call_tool("get_repository", {"owner": "o", "repo": "r"})

    tool_records = [r for r in caplog.records if r.name == "github_custom_mcp.tools"]
    assert len(tool_records) == 2
    assert tool_records[0].getMessage() == "[tool] get_repository start (tool_call.start)"
    assert tool_records[-1].getMessage().endswith("(tool_call.error)")
    assert tool_records[-1].levelname == "WARNING"
    assert '"category":"not_found"' in tool_records[-1].tool_json
