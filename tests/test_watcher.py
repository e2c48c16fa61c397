"""
Tests for the poll loop.
"""

import threading
from datetime import datetime, timezone

import httpx
import pytest

from ci_alert.client import GitHubClient
from ci_alert.config import WatchConfig
from ci_alert.exceptions import ServerError
from ci_alert.testing import (
    MockGitHubClient,
    RecordingNotifier,
    create_mock_pull_request,
    create_mock_status,
)
from ci_alert.tracker import MergeStatusTable
from ci_alert.transport import RetryConfig
from ci_alert.watcher import PRWatcher


@pytest.fixture(autouse=True)
def recent_pull_requests(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pin the filter's clock so fixture PRs fall inside the window."""
    from ci_alert import filter as filter_module

    class FixedDatetime(datetime):
        @classmethod
        def now(cls, tz=None):
            return datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc)

    monkeypatch.setattr(filter_module, "datetime", FixedDatetime)


def make_watcher(
    client: MockGitHubClient,
    notifier: RecordingNotifier,
    config: WatchConfig,
    **kwargs,
) -> PRWatcher:
    return PRWatcher(client, notifier, config, **kwargs)


def test_failing_ci_skips_merge_check(mock_client, recording_notifier, watch_config) -> None:
    pr = create_mock_pull_request(42)
    mock_client.pulls.configure_list(pages=[[pr]])
    mock_client.statuses.configure_list(pr.head_sha, [create_mock_status("ci/build", "failure")])
    mock_client.pulls.configure_get(42, create_mock_pull_request(42, merged=True))

    watcher = make_watcher(mock_client, recording_notifier, watch_config)
    watcher.refresh()
    result = watcher.run_round()

    assert result.ci_failing == [42]
    assert not mock_client.was_called("pulls.get")
    assert recording_notifier.titles() == ["PR #42 CI Failure"] * watch_config.failure_repeat


def test_passing_ci_checks_merge(mock_client, recording_notifier, watch_config) -> None:
    pr = create_mock_pull_request(42)
    mock_client.pulls.configure_list(pages=[[pr]])
    mock_client.statuses.configure_list(pr.head_sha, [create_mock_status("ci/build", "success")])
    mock_client.pulls.configure_get(42, create_mock_pull_request(42, merged=True))

    watcher = make_watcher(mock_client, recording_notifier, watch_config)
    watcher.refresh()
    result = watcher.run_round()

    assert result.merged == [42]
    assert result.closed == [42]
    assert recording_notifier.titles() == ["PR #42 Merged"]
    # Merged and notified: no longer tracked, but remembered
    assert watcher.tracked == []
    assert watcher.merge_table.get(42) is True


def test_one_pull_request_error_does_not_stop_the_round(
    mock_client, recording_notifier, watch_config
) -> None:
    broken = create_mock_pull_request(2)
    healthy = create_mock_pull_request(1)
    mock_client.pulls.configure_list(pages=[[broken, healthy]])
    mock_client.pulls.configure_get(2, error=ServerError("HTTP_500", "boom"))
    mock_client.pulls.configure_get(1, create_mock_pull_request(1, merged=True))

    watcher = make_watcher(mock_client, recording_notifier, watch_config)
    watcher.refresh()
    result = watcher.run_round()

    assert result.checked == [2, 1]
    assert result.skipped == [2]
    assert result.merged == [1]
    assert [pr.number for pr in watcher.tracked] == [2]


def test_unexpected_error_is_contained(mock_client, recording_notifier, watch_config) -> None:
    first = create_mock_pull_request(2)
    second = create_mock_pull_request(1)
    mock_client.pulls.configure_get(1, create_mock_pull_request(1))

    watcher = make_watcher(mock_client, recording_notifier, watch_config)
    original = watcher.evaluator.evaluate

    def explode_on_two(owner, repo, pr):
        if pr.number == 2:
            raise KeyError("state")
        return original(owner, repo, pr)

    watcher.evaluator.evaluate = explode_on_two
    result = watcher.run_round([first, second])

    assert result.skipped == [2]
    assert result.checked == [2, 1]
    assert mock_client.was_called("pulls.get")


def test_merge_between_rounds_is_still_reported(
    mock_client, recording_notifier, watch_config
) -> None:
    pr = create_mock_pull_request(42)
    mock_client.pulls.configure_list(pages=[[pr]])
    mock_client.pulls.configure_get(
        42,
        create_mock_pull_request(42, merged=False),
        create_mock_pull_request(42, merged=True),
    )

    watcher = make_watcher(mock_client, recording_notifier, watch_config)
    watcher.refresh()
    watcher.run_round()

    # Merged before the next round: it vanishes from the open listing
    mock_client.pulls.configure_list(pages=[[]])
    watcher.refresh()
    result = watcher.run_round()

    assert result.merged == [42]
    assert recording_notifier.titles() == ["PR #42 Merged"]
    # No CI check for a PR that has left the open listing
    assert mock_client.call_count("statuses.list_all") == 1
    assert watcher.tracked == []


def test_refresh_picks_up_new_pull_requests(mock_client, recording_notifier, watch_config) -> None:
    first = create_mock_pull_request(1)
    second = create_mock_pull_request(2)
    mock_client.pulls.configure_list(pages=[[first]])

    watcher = make_watcher(mock_client, recording_notifier, watch_config)
    watcher.refresh()
    mock_client.pulls.configure_list(pages=[[second, first]])
    tracked = watcher.refresh()

    assert [pr.number for pr in tracked] == [2, 1]


def test_refresh_failure_keeps_previous_set(mock_client, recording_notifier, watch_config) -> None:
    pr = create_mock_pull_request(1)
    mock_client.pulls.configure_list(pages=[[pr]])

    watcher = make_watcher(mock_client, recording_notifier, watch_config)
    watcher.refresh()
    mock_client.pulls.configure_list(error=ServerError("HTTP_502", "Bad Gateway"))

    assert watcher.refresh() == [pr]


def test_closed_unmerged_pull_request_is_dropped(
    mock_client, recording_notifier, watch_config
) -> None:
    pr = create_mock_pull_request(5)
    mock_client.pulls.configure_list(pages=[[pr]])
    mock_client.pulls.configure_get(5, create_mock_pull_request(5, state="closed"))

    watcher = make_watcher(mock_client, recording_notifier, watch_config)
    watcher.refresh()
    result = watcher.run_round()

    assert result.closed == [5]
    assert result.merged == []
    assert recording_notifier.posted == []
    assert watcher.tracked == []


def test_injected_merge_table_is_used(mock_client, recording_notifier, watch_config) -> None:
    table = MergeStatusTable({42: True})
    mock_client.pulls.configure_get(42, create_mock_pull_request(42, merged=True))

    watcher = make_watcher(mock_client, recording_notifier, watch_config, merge_table=table)
    result = watcher.run_round([create_mock_pull_request(42)])

    assert watcher.merge_table is table
    assert result.merged == []
    assert recording_notifier.posted == []


def test_run_forever_bounded_rounds(mock_client, recording_notifier, watch_config) -> None:
    pr = create_mock_pull_request(42)
    mock_client.pulls.configure_list(pages=[[pr]])
    mock_client.pulls.configure_get(42, create_mock_pull_request(42))

    watcher = make_watcher(mock_client, recording_notifier, watch_config)
    watcher.run_forever(max_rounds=3)

    assert watcher.rounds == 3
    assert mock_client.call_count("pulls.list") == 3
    assert mock_client.call_count("pulls.get") == 3


def test_without_refresh_the_listing_is_fetched_once(
    mock_client, recording_notifier, watch_config
) -> None:
    pr = create_mock_pull_request(42)
    mock_client.pulls.configure_list(pages=[[pr]])
    mock_client.pulls.configure_get(42, create_mock_pull_request(42))
    config = watch_config.with_overrides(refresh_each_round=False)

    watcher = make_watcher(mock_client, recording_notifier, config)
    watcher.run_forever(max_rounds=3)

    assert mock_client.call_count("pulls.list") == 1
    assert mock_client.call_count("pulls.get") == 3


def test_stop_event_ends_the_loop(mock_client, recording_notifier, watch_config) -> None:
    stop_event = threading.Event()
    config = watch_config.with_overrides(poll_interval=3600.0)
    watcher = make_watcher(mock_client, recording_notifier, config, stop_event=stop_event)

    thread = threading.Thread(target=watcher.run_forever)
    thread.start()
    watcher.stop()
    thread.join(timeout=5)

    assert not thread.is_alive()
    assert watcher.stopped


def test_stopped_watcher_checks_nothing(mock_client, recording_notifier, watch_config) -> None:
    watcher = make_watcher(mock_client, recording_notifier, watch_config)
    watcher.stop()

    result = watcher.run_round([create_mock_pull_request(1)])

    assert result.checked == []


def pull_payload(number: int) -> dict:
    return {
        "number": number,
        "state": "open",
        "merged": False,
        "title": "Fix flaky test",
        "user": {"login": "octocat"},
        "head": {"sha": f"sha-{number}"},
        "created_at": "2024-06-14T12:00:00Z",
    }


def served_client(handler) -> GitHubClient:
    client = GitHubClient(token="test-token", retry_config=RetryConfig(max_retries=0))
    client.transport._client = httpx.Client(
        base_url=client.base_url,
        transport=httpx.MockTransport(handler),
    )
    return client


def test_html_listing_keeps_previous_set(recording_notifier, watch_config) -> None:
    listings = []

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/repos/octo/hello/pulls":
            listings.append(path)
            if len(listings) == 1:
                return httpx.Response(200, json=[pull_payload(1)])
            return httpx.Response(200, text="<html>proxy error</html>")
        if path.endswith("/statuses"):
            return httpx.Response(200, json=[])
        return httpx.Response(200, json=pull_payload(1))

    with served_client(handler) as client:
        watcher = PRWatcher(client, recording_notifier, watch_config)
        watcher.run_forever(max_rounds=2)

    assert watcher.rounds == 2
    assert len(listings) == 2
    assert [pr.number for pr in watcher.tracked] == [1]


def test_html_everywhere_does_not_end_the_loop(recording_notifier, watch_config) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>proxy error</html>")

    with served_client(handler) as client:
        watcher = PRWatcher(client, recording_notifier, watch_config)
        watcher.run_forever(max_rounds=2)

    assert watcher.rounds == 2
    assert watcher.tracked == []
    assert recording_notifier.posted == []
