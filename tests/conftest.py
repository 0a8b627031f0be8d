import asyncio
import inspect
from typing import Any

import pytest


def pytest_configure(config):
    config.addinivalue_line("markers", "asyncio: mark test to run in event loop")


def pytest_pyfunc_call(pyfuncitem):
    if "asyncio" not in pyfuncitem.keywords:
        return None

    test_func = pyfuncitem.obj
    if not inspect.iscoroutinefunction(test_func):
        return None

    # Only pass the fixtures the test asked for; autouse fixtures are in funcargs too.
    kwargs = {name: pyfuncitem.funcargs[name] for name in pyfuncitem._fixtureinfo.argnames}

    loop = asyncio.new_event_loop()
    try:
        asyncio.set_event_loop(loop)
        loop.run_until_complete(test_func(**kwargs))
    finally:
        loop.close()
        asyncio.set_event_loop(None)

    return True


@pytest.fixture(autouse=True)
def _github_token_and_metrics(monkeypatch):
    """Every test starts with a token configured and empty metrics."""

    import main

    for name in ("GITHUB_PERSONAL_ACCESS_TOKEN", "GITHUB_PAT", "GITHUB_TOKEN"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("GITHUB_PERSONAL_ACCESS_TOKEN", "test-token")
    main._reset_metrics_for_tests()
    yield
    main._reset_metrics_for_tests()


class FakeGitHub:
    """Stand-in for ``main._github_request`` that records every call."""

    def __init__(self, json_data: Any = None, exc: BaseException | None = None) -> None:
        self.json_data = json_data
        self.exc = exc
        self.calls: list[dict[str, Any]] = []

    async def __call__(self, method, path, *, params=None, json_body=None, headers=None, **kwargs):
        self.calls.append(
            {"method": method, "path": path, "params": params, "json_body": json_body}
        )
        if self.exc is not None:
            raise self.exc
        return {"status_code": 200, "headers": {}, "text": "", "json": self.json_data}


@pytest.fixture
def fake_github(monkeypatch):
    """Install a FakeGitHub on ``main``; set ``.json_data`` / ``.exc`` per test."""

    import main

    fake = FakeGitHub()
    monkeypatch.setattr(main, "_github_request", fake)
    return fake
