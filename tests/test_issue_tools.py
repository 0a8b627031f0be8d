import pytest

import main


@pytest.mark.asyncio
async def test_list_issues_sends_expected_request(fake_github) -> None:
    fake_github.json_data = []

    await main.list_issues(owner="owner", repo="repo", state="closed", per_page=5)

    assert fake_github.calls == [
        {
            "method": "GET",
            "path": "/repos/owner/repo/issues",
            "params": {"state": "closed", "per_page": 5},
            "json_body": None,
        }
    ]


@pytest.mark.asyncio
async def test_list_issues_renders_labels_and_dates(fake_github) -> None:
    fake_github.json_data = [
        {
            "number": 12,
            "title": "Crash on start",
            "state": "open",
            "labels": [{"name": "bug"}, {"name": "p1"}],
            "created_at": "2024-01-01T00:00:00Z",
            "updated_at": "2024-02-03T04:05:06Z",
            "html_url": "https://github.com/owner/repo/issues/12",
        },
        {
            "number": 13,
            "title": "Docs",
            "state": "open",
            "labels": [],
            "created_at": "2024-01-05T00:00:00Z",
            "updated_at": None,
            "html_url": "https://github.com/owner/repo/issues/13",
        },
    ]

    result = await main.list_issues(owner="owner", repo="repo")

    text = result.text
    assert text.startswith("Found 2 open issues in owner/repo:\n\n")
    assert "- **#12**: Crash on start [open]" in text
    assert "🏷 bug, p1" in text
    assert "📅 Created: 2024-01-01 | Updated: 2024-02-03" in text
    assert "🔗 https://github.com/owner/repo/issues/12" in text
    assert "- **#13**: Docs [open]" in text
    assert "🏷 No labels" in text
    assert "Updated: Unknown" in text


def test_label_names_accepts_objects_and_strings():
    from github_custom_mcp.main_tools.issues import _label_names

    assert _label_names([{"name": "bug"}, "docs", {"color": "fff"}, None]) == ["bug", "docs"]
    assert _label_names(None) == []


@pytest.mark.asyncio
async def test_create_issue_sends_expected_payload(fake_github) -> None:
    fake_github.json_data = {
        "number": 123,
        "title": "Issue title",
        "html_url": "https://github.com/owner/repo/issues/123",
        "created_at": "2024-05-06T07:08:09Z",
    }

    result = await main.create_issue(
        owner="owner",
        repo="repo",
        title="Issue title",
        body="Body text",
        labels=["bug", "roadmap"],
    )

    assert fake_github.calls[0]["method"] == "POST"
    assert fake_github.calls[0]["path"] == "/repos/owner/repo/issues"
    assert fake_github.calls[0]["json_body"] == {
        "title": "Issue title",
        "body": "Body text",
        "labels": ["bug", "roadmap"],
    }
    assert result.text == (
        '✅ Successfully created issue #123: "Issue title"\n\n'
        "🔗 URL: https://github.com/owner/repo/issues/123\n"
        "📅 Created: 2024-05-06"
    )


@pytest.mark.asyncio
async def test_create_issue_omits_body_when_absent(fake_github) -> None:
    fake_github.json_data = {"number": 1, "title": "t", "html_url": "u", "created_at": None}

    await main.create_issue(owner="o", repo="r", title="t")

    assert fake_github.calls[0]["json_body"] == {"title": "t", "labels": []}
