"""CI verdicts for pull request head commits."""

from collections.abc import Iterable
from typing import TYPE_CHECKING

from ci_alert.exceptions import CIAlertError
from ci_alert.logging import get_logger
from ci_alert.notifier import Notifier, failure_alert
from ci_alert.types.pulls import PullRequest
from ci_alert.types.statuses import StatusEntry

if TYPE_CHECKING:
    from ci_alert.clients.statuses import StatusesClient

logger = get_logger("evaluator")


def latest_statuses(entries: Iterable[StatusEntry]) -> dict[str, StatusEntry]:
    """
    Reduce a status history to the most recent entry per context.

    On equal ``updated_at`` the entry seen last wins.
    """
    latest: dict[str, StatusEntry] = {}
    for entry in entries:
        current = latest.get(entry.context)
        if current is None or entry.updated_at >= current.updated_at:
            latest[entry.context] = entry
    return latest


def failing_contexts(
    latest: dict[str, StatusEntry], excluded: Iterable[str] = ()
) -> list[str]:
    """Names of contexts whose latest state is failure and that are not excluded."""
    skip = frozenset(excluded)
    return sorted(
        context
        for context, entry in latest.items()
        if entry.is_failure and context not in skip
    )


class CIEvaluator:
    """Decides whether a pull request's required CI is failing and alerts on it."""

    def __init__(
        self,
        statuses: "StatusesClient",
        notifier: Notifier,
        excluded_contexts: Iterable[str] = (),
        repeat: int = 3,
        notification_timeout: int = 10,
        notification_sound: str = "default",
    ) -> None:
        """
        Args:
            statuses: Statuses resource client
            notifier: Sink for failure alerts
            excluded_contexts: Non-required contexts that never fail a PR
            repeat: Times each failure alert is posted
            notification_timeout: Seconds a notification stays on screen
            notification_sound: Notification sound name
        """
        self.statuses = statuses
        self.notifier = notifier
        self.excluded_contexts = frozenset(excluded_contexts)
        self.repeat = repeat
        self.notification_timeout = notification_timeout
        self.notification_sound = notification_sound

    def evaluate(self, owner: str, repo: str, pr: PullRequest) -> bool:
        """
        Check CI on the pull request's head commit.

        One failure alert is emitted per failing required context. A failed
        fetch or an empty status list counts as passing: no evidence of
        failure is not a failure.

        Returns:
            True if no required CI context is failing
        """
        try:
            entries = self.statuses.list_all(owner, repo, pr.head_sha)
        except CIAlertError as e:
            logger.error("Error getting CI status for PR #%d: %s", pr.number, e)
            return True

        if not entries:
            logger.info("No statuses found for PR #%d (%s)", pr.number, pr.head_sha)
            return True

        latest = latest_statuses(entries)
        logger.debug(
            "Found %d statuses in %d contexts for PR #%d",
            len(entries), len(latest), pr.number,
        )

        failing = failing_contexts(latest, self.excluded_contexts)
        for context in failing:
            logger.warning("CI context %s failed for PR #%d", context, pr.number)
            self.notifier.notify(
                failure_alert(
                    pr.number,
                    pr.title,
                    context,
                    timeout=self.notification_timeout,
                    sound=self.notification_sound,
                ),
                repeat=self.repeat,
            )

        return not failing
