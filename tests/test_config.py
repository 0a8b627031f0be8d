import logging

import pytest

from github_custom_mcp import config


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, logging.INFO),
        ("", logging.INFO),
        ("debug", logging.DEBUG),
        (" Warning ", logging.WARNING),
        ("detailed", config.DETAILED_LEVEL),
        ("25", 25),
        ("not-a-level", logging.INFO),
    ],
)
def test_resolve_log_level(raw, expected):
    assert config._resolve_log_level(raw) == expected


def test_detailed_level_is_installed():
    assert logging.getLevelName(config.DETAILED_LEVEL) == "DETAILED"
    assert hasattr(logging.getLogger("anything"), "detailed")


@pytest.mark.parametrize(
    "raw, expected",
    [("1", True), ("yes", True), (" ON ", True), ("0", False), ("off", False), ("", False)],
)
def test_env_flag(monkeypatch, raw, expected):
    monkeypatch.setenv("GITHUB_MCP_TEST_FLAG", raw)
    assert config._env_flag("GITHUB_MCP_TEST_FLAG") is expected


def test_env_flag_default_when_unset(monkeypatch):
    monkeypatch.delenv("GITHUB_MCP_TEST_FLAG", raising=False)
    assert config._env_flag("GITHUB_MCP_TEST_FLAG", True) is True


def test_env_numbers_fall_back_on_garbage(monkeypatch):
    monkeypatch.setenv("GITHUB_MCP_TEST_INT", "lots")
    monkeypatch.setenv("GITHUB_MCP_TEST_FLOAT", "12.5")

    assert config._env_int("GITHUB_MCP_TEST_INT", 7) == 7
    assert config._env_float("GITHUB_MCP_TEST_FLOAT", 1.0) == 12.5


def test_token_variables_are_checked_in_order():
    assert config.GITHUB_TOKEN_ENV_VARS == (
        "GITHUB_PERSONAL_ACCESS_TOKEN",
        "GITHUB_PAT",
        "GITHUB_TOKEN",
    )
