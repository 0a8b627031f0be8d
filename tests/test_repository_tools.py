import pytest

import main

REPO_ITEM = {
    "name": "hello",
    "full_name": "octo/hello",
    "description": "Hello world",
    "html_url": "https://github.com/octo/hello",
    "stargazers_count": 42,
    "forks_count": 7,
    "language": "Python",
    "updated_at": "2024-03-05T10:20:30Z",
    "owner": {"login": "octo"},
}


@pytest.mark.asyncio
async def test_search_repositories_renders_projected_fields(fake_github) -> None:
    fake_github.json_data = {
        "total_count": 2,
        "items": [
            REPO_ITEM,
            {**REPO_ITEM, "full_name": "octo/bare", "description": None, "language": None},
        ],
    }

    result = await main.search_repositories(query="hello", sort="forks", per_page=5)

    assert fake_github.calls[0]["method"] == "GET"
    assert fake_github.calls[0]["path"] == "/search/repositories"
    assert fake_github.calls[0]["params"] == {"q": "hello", "sort": "forks", "per_page": 5}

    text = result.text
    assert text.startswith("Found 2 repositories:")
    assert "- **octo/hello**: Hello world" in text
    assert "⭐ 42 stars | 🍴 7 forks | 🗣 Python | 📅 2024-03-05" in text
    assert "🔗 https://github.com/octo/hello" in text
    assert "- **octo/bare**: No description" in text
    assert "🗣 Unknown" in text


@pytest.mark.asyncio
async def test_search_repositories_empty(fake_github) -> None:
    fake_github.json_data = {"total_count": 0, "items": []}

    result = await main.search_repositories(query="zzz")

    assert result.text == "Found 0 repositories:"


@pytest.mark.asyncio
async def test_search_repositories_coerces_float_per_page(fake_github) -> None:
    fake_github.json_data = {"items": []}

    await main.call_tool("search_repositories", {"query": "x", "per_page": 10.0})

    assert fake_github.calls[0]["params"]["per_page"] == 10
    assert isinstance(fake_github.calls[0]["params"]["per_page"], int)


@pytest.mark.asyncio
async def test_get_repository_renders_summary(fake_github) -> None:
    fake_github.json_data = {
        "full_name": "octo/hello",
        "description": "",
        "stargazers_count": 3,
        "forks_count": 1,
        "watchers_count": 9,
        "created_at": "2020-01-02T00:00:00Z",
        "updated_at": "2024-06-07T00:00:00Z",
        "language": "Go",
        "html_url": "https://github.com/octo/hello",
    }

    result = await main.get_repository(owner="octo", repo="hello")

    assert fake_github.calls[0]["path"] == "/repos/octo/hello"
    lines = result.text.splitlines()
    assert lines[0] == "**octo/hello**"
    assert "📝 No description" in lines
    assert "⭐ 3 stars" in lines
    assert "🍴 1 forks" in lines
    assert "👀 9 watchers" in lines
    assert "📅 Created: 2020-01-02" in lines
    assert "🔄 Updated: 2024-06-07" in lines
    assert "🗣 Language: Go" in lines
    assert lines[-1] == "🔗 URL: https://github.com/octo/hello"
