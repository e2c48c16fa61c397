"""
Tests for the GitHub client.
"""

import pytest

from ci_alert.client import GitHubClient
from ci_alert.clients import PullsClient, StatusesClient
from ci_alert.exceptions import ConfigurationError


def test_client_initialization() -> None:
    client = GitHubClient(
        token="test-token",
        base_url="https://github.example.com/api/v3",
        timeout=10.0,
    )

    assert client.base_url == "https://github.example.com/api/v3"
    assert client.timeout == 10.0
    assert isinstance(client.pulls, PullsClient)
    assert isinstance(client.statuses, StatusesClient)
    assert client.pulls.transport is client.transport
    assert client.statuses.transport is client.transport

    client.close()


def test_client_context_manager() -> None:
    with GitHubClient(token="test-token") as client:
        assert client.base_url == GitHubClient.DEFAULT_BASE_URL

    assert client.transport._client.is_closed


def test_client_requires_token() -> None:
    with pytest.raises(ConfigurationError):
        GitHubClient(token="")


def test_from_env_missing_token(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)

    with pytest.raises(ConfigurationError) as exc_info:
        GitHubClient.from_env()

    assert "GITHUB_TOKEN" in exc_info.value.message


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_abcdefghijklmnopqrstuvwxyz")
    monkeypatch.setenv("GITHUB_API_URL", "https://github.example.com/api/v3")

    with GitHubClient.from_env(timeout=5.0) as client:
        assert client.base_url == "https://github.example.com/api/v3"
        assert client.timeout == 5.0
        assert client.transport._client.headers["Authorization"] == (
            "Bearer ghp_abcdefghijklmnopqrstuvwxyz"
        )


def test_from_env_default_base_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "test-token")
    monkeypatch.delenv("GITHUB_API_URL", raising=False)

    with GitHubClient.from_env() as client:
        assert client.base_url == "https://api.github.com"
