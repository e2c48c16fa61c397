"""
The poll loop.

Each round refreshes the tracked pull requests, checks CI on every one of them
and, where CI is not failing, checks whether it has been merged. Rounds are
separated by the configured poll interval until the watcher is stopped.
"""

import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ci_alert.evaluator import CIEvaluator
from ci_alert.exceptions import CIAlertError
from ci_alert.filter import find_recent_pull_requests
from ci_alert.logging import get_logger
from ci_alert.notifier import Notifier
from ci_alert.tracker import MergeStatusTable, MergeTracker
from ci_alert.types.pulls import PullRequest

if TYPE_CHECKING:
    from ci_alert.client import GitHubClient
    from ci_alert.config import WatchConfig

logger = get_logger("watcher")


@dataclass
class RoundResult:
    """What happened to each pull request during one round."""

    checked: list[int] = field(default_factory=list)
    ci_failing: list[int] = field(default_factory=list)
    merged: list[int] = field(default_factory=list)
    closed: list[int] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)


class PRWatcher:
    """
    Watches one author's recent pull requests for CI failures and merges.

    All state (tracked pull requests, merge table) belongs to the watcher
    instance and is driven from a single thread.

    Example:
        ```python
        from ci_alert import GitHubClient, PRWatcher, TerminalNotifier, WatchConfig

        with GitHubClient.from_env() as client:
            watcher = PRWatcher(client, TerminalNotifier(), WatchConfig())
            watcher.run_forever()
        ```
    """

    def __init__(
        self,
        client: "GitHubClient",
        notifier: Notifier,
        config: "WatchConfig",
        merge_table: MergeStatusTable | None = None,
        stop_event: threading.Event | None = None,
    ) -> None:
        """
        Args:
            client: API client (real or mock)
            notifier: Sink for failure and merge alerts
            config: What to watch and how
            merge_table: Pre-seeded merge table (default: empty)
            stop_event: Event that ends run_forever when set (default: a new one)
        """
        self.client = client
        self.notifier = notifier
        self.config = config
        self.merge_table = merge_table if merge_table is not None else MergeStatusTable()
        self._stop_event = stop_event or threading.Event()

        self.evaluator = CIEvaluator(
            client.statuses,
            notifier,
            excluded_contexts=config.excluded_contexts,
            repeat=config.failure_repeat,
            notification_timeout=config.notification_timeout,
            notification_sound=config.notification_sound,
        )
        self.tracker = MergeTracker(
            client.pulls,
            notifier,
            table=self.merge_table,
            repeat=config.merge_repeat,
            notification_timeout=config.notification_timeout,
            notification_sound=config.notification_sound,
        )

        self.tracked: list[PullRequest] = []
        # Tracked PRs that no longer appear in the open listing
        self._departed: set[int] = set()
        self._loaded = False
        self.rounds = 0

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def stop(self) -> None:
        """Ask the loop to finish; an in-progress sleep ends immediately."""
        logger.info("Stop requested")
        self._stop_event.set()

    def refresh(self) -> list[PullRequest]:
        """
        Replace the tracked set with the current filter result.

        Pull requests that dropped out of the open listing stay tracked until
        their detail shows them closed, so a merge between rounds is still
        reported. If the listing fails the previous set is kept.
        """
        try:
            fresh = find_recent_pull_requests(
                self.client.pulls,
                self.config.owner,
                self.config.repo,
                self.config.author,
                window=self.config.window,
                page_size=self.config.page_size,
            )
        except CIAlertError as e:
            logger.error("Error fetching PRs for %s: %s", self.config.full_repo, e)
            return self.tracked

        fresh_numbers = {pr.number for pr in fresh}
        departed = [pr for pr in self.tracked if pr.number not in fresh_numbers]

        self._departed = {pr.number for pr in departed}
        self.tracked = fresh + departed
        self._loaded = True

        logger.info(
            "Tracking %d PRs (%d no longer listed as open)",
            len(self.tracked), len(departed),
        )
        return self.tracked

    def run_round(self, prs: list[PullRequest] | None = None) -> RoundResult:
        """
        Check every pull request once.

        An error while handling one pull request is logged and does not stop
        the others. Pull requests seen closed are no longer tracked afterwards.

        Args:
            prs: Pull requests to check (default: the tracked set)
        """
        result = RoundResult()
        for pr in self.tracked if prs is None else prs:
            if self.stopped:
                break
            logger.info("Checking PR #%d", pr.number)
            result.checked.append(pr.number)
            try:
                self._check_pull_request(pr, result)
            except Exception:
                logger.exception("Unexpected error while checking PR #%d", pr.number)
                result.skipped.append(pr.number)

        if result.closed:
            closed = set(result.closed)
            self.tracked = [pr for pr in self.tracked if pr.number not in closed]
            self._departed -= closed

        return result

    def _check_pull_request(self, pr: PullRequest, result: RoundResult) -> None:
        owner, repo = self.config.owner, self.config.repo

        # A PR that left the open listing has no CI worth alerting on
        if pr.number not in self._departed:
            if not self.evaluator.evaluate(owner, repo, pr):
                result.ci_failing.append(pr.number)
                return

        previously_merged = self.merge_table.get(pr.number)
        detail = self.tracker.check(owner, repo, pr)
        if detail is None:
            result.skipped.append(pr.number)
            return

        if detail.merged and previously_merged is not True:
            result.merged.append(pr.number)
        if detail.is_closed:
            result.closed.append(pr.number)

    def run_forever(self, max_rounds: int | None = None) -> None:
        """
        Poll until stopped.

        Args:
            max_rounds: Stop after this many rounds (default: never)
        """
        logger.info(
            "Watching PRs by %s in %s every %ss",
            self.config.author, self.config.full_repo, self.config.poll_interval,
        )

        while not self.stopped:
            # Without per-round refresh the set is loaded once, retrying until it succeeds
            if self.config.refresh_each_round or not self._loaded:
                self.refresh()

            result = self.run_round()
            self.rounds += 1
            logger.info(
                "Round %d done: %d checked, %d failing CI, %d merged",
                self.rounds, len(result.checked), len(result.ci_failing), len(result.merged),
            )

            if max_rounds is not None and self.rounds >= max_rounds:
                break

            self._stop_event.wait(self.config.poll_interval)

        logger.info("Watcher stopped after %d rounds", self.rounds)
