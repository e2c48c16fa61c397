"""Merge detection with exactly-once alerts."""

from typing import TYPE_CHECKING

from ci_alert.exceptions import CIAlertError
from ci_alert.logging import get_logger
from ci_alert.notifier import Notifier, merge_alert
from ci_alert.types.pulls import PullRequest

if TYPE_CHECKING:
    from ci_alert.clients.pulls import PullsClient

logger = get_logger("tracker")


class MergeStatusTable:
    """Last observed merged flag per pull request number.

    Entries are never removed, so a merge is reported at most once for the
    lifetime of the table.
    """

    def __init__(self, initial: dict[int, bool] | None = None) -> None:
        self._merged: dict[int, bool] = dict(initial or {})

    def get(self, number: int) -> bool | None:
        return self._merged.get(number)

    def observe(self, number: int, merged: bool) -> bool:
        """Record an observation. Returns True if it differs from the stored value."""
        if number in self._merged and self._merged[number] == merged:
            return False
        self._merged[number] = merged
        return True

    def snapshot(self) -> dict[int, bool]:
        return dict(self._merged)

    def __contains__(self, number: object) -> bool:
        return number in self._merged

    def __len__(self) -> int:
        return len(self._merged)


class MergeTracker:
    """Alerts once when a tracked pull request becomes merged."""

    def __init__(
        self,
        pulls: "PullsClient",
        notifier: Notifier,
        table: MergeStatusTable | None = None,
        repeat: int = 1,
        notification_timeout: int = 10,
        notification_sound: str = "default",
    ) -> None:
        self.pulls = pulls
        self.notifier = notifier
        self.table = table if table is not None else MergeStatusTable()
        self.repeat = repeat
        self.notification_timeout = notification_timeout
        self.notification_sound = notification_sound

    def record(self, pr: PullRequest) -> bool:
        """
        Compare an observed pull request with the table and alert on a new merge.

        Returns:
            True if a merge alert was emitted
        """
        if not self.table.observe(pr.number, pr.merged):
            return False

        logger.debug("PR #%d merged status is now %s", pr.number, pr.merged)
        if not pr.merged:
            return False

        logger.info("PR #%d merged", pr.number)
        self.notifier.notify(
            merge_alert(
                pr.number,
                pr.title,
                timeout=self.notification_timeout,
                sound=self.notification_sound,
            ),
            repeat=self.repeat,
        )
        return True

    def check(self, owner: str, repo: str, pr: PullRequest) -> PullRequest | None:
        """
        Fetch the pull request detail and record its merged flag.

        Returns:
            The fresh pull request, or None if the detail fetch failed
        """
        try:
            detail = self.pulls.get(owner, repo, pr.number)
        except CIAlertError as e:
            logger.error("Error getting details for PR #%d: %s", pr.number, e)
            return None

        self.record(detail)
        return detail
