"""
Pytest fixtures for ci-alert testing.
"""

from datetime import datetime, timedelta, timezone
from typing import Generator

import pytest

from ci_alert.config import WatchConfig
from ci_alert.testing.mock import MockGitHubClient, RecordingNotifier
from ci_alert.types.pulls import PullRequest
from ci_alert.types.statuses import StatusEntry

FIXED_NOW = datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


def create_mock_pull_request(
    number: int = 42,
    author_login: str = "octocat",
    created_at: datetime | None = None,
    head_sha: str | None = None,
    title: str | None = None,
    merged: bool = False,
    state: str | None = None,
) -> PullRequest:
    """Create a PullRequest with sensible defaults."""
    if state is None:
        state = "closed" if merged else "open"
    return PullRequest(
        number=number,
        author_login=author_login,
        created_at=created_at or FIXED_NOW - timedelta(days=1),
        head_sha=head_sha or f"sha-{number}",
        title=title or f"Change number {number}",
        merged=merged,
        state=state,
        html_url=f"https://github.com/octo/hello/pull/{number}",
    )


def create_mock_status(
    context: str = "ci/build",
    state: str = "success",
    updated_at: datetime | None = None,
) -> StatusEntry:
    """Create a StatusEntry with sensible defaults."""
    return StatusEntry(
        context=context,
        state=state,
        updated_at=updated_at or FIXED_NOW,
    )


# ============================================================================
# Mock Client Fixtures
# ============================================================================


@pytest.fixture
def mock_client() -> Generator[MockGitHubClient, None, None]:
    """
    Provide a MockGitHubClient for testing.

    Example:
        ```python
        def test_my_feature(mock_client):
            mock_client.pulls.configure_list(pages=[[pr]])
            result = my_function(mock_client)
            assert mock_client.was_called("pulls.list")
        ```
    """
    client = MockGitHubClient()
    yield client
    client.reset()


@pytest.fixture
def recording_notifier() -> RecordingNotifier:
    """Provide a notifier that records alerts in memory."""
    return RecordingNotifier()


@pytest.fixture
def watch_config() -> WatchConfig:
    """Provide a configuration for the octo/hello repository and octocat."""
    return WatchConfig(
        owner="octo",
        repo="hello",
        author="octocat",
        poll_interval=0.01,
        excluded_contexts=frozenset({"ci/optional"}),
    )


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_pull_request() -> PullRequest:
    """Provide a sample open PullRequest."""
    return create_mock_pull_request()


@pytest.fixture
def sample_statuses() -> list[StatusEntry]:
    """Provide a status history where ci/build failed, then passed on re-run."""
    return [
        create_mock_status("ci/build", "success", FIXED_NOW),
        create_mock_status("ci/build", "failure", FIXED_NOW - timedelta(minutes=30)),
        create_mock_status("ci/lint", "success", FIXED_NOW - timedelta(minutes=20)),
    ]
