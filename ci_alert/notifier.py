"""
Desktop notifiers for ci-alert.

Supports macOS `terminal-notifier`; other sinks implement the Notifier
interface.
"""

import subprocess
import time
from abc import ABC, abstractmethod
from collections.abc import Callable

from ci_alert.exceptions import NotificationError
from ci_alert.logging import get_logger
from ci_alert.types.notifications import Alert

logger = get_logger("notify")


class Notifier(ABC):
    """Abstract base class for notification sinks."""

    def __init__(
        self,
        repeat_interval: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.repeat_interval = repeat_interval
        self._sleep = sleep

    @abstractmethod
    def post(self, alert: Alert) -> None:
        """Display an alert. Raises NotificationError on failure."""
        pass

    @abstractmethod
    def remove(self, group: str) -> None:
        """Remove any notification shown for a group. Raises NotificationError on failure."""
        pass

    def notify(self, alert: Alert, repeat: int = 1) -> int:
        """
        Replace the group's stale notification and post an alert.

        Best effort: failures are logged and never raised.

        Args:
            alert: The alert to show
            repeat: How many times to post it

        Returns:
            Number of posts that succeeded
        """
        try:
            self.remove(alert.group)
        except NotificationError as e:
            logger.warning("Error removing old notification for %s: %s", alert.group, e)

        delivered = 0
        for attempt in range(repeat):
            if attempt:
                self._sleep(self.repeat_interval)
            try:
                self.post(alert)
                delivered += 1
            except NotificationError as e:
                logger.warning("Error sending notification %r: %s", alert.title, e)

        return delivered


class TerminalNotifier(Notifier):
    """Notifier backed by the `terminal-notifier` command line tool."""

    DEFAULT_BINARY = "terminal-notifier"

    def __init__(
        self,
        binary: str = DEFAULT_BINARY,
        repeat_interval: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
        command_timeout: float = 30.0,
    ) -> None:
        """
        Args:
            binary: Path or name of the terminal-notifier executable
            repeat_interval: Seconds to wait between repeated posts
            sleep: Sleep function (injectable for tests)
            command_timeout: Seconds before an invocation is abandoned
        """
        super().__init__(repeat_interval=repeat_interval, sleep=sleep)
        self.binary = binary
        self.command_timeout = command_timeout

    def post(self, alert: Alert) -> None:
        self._run([
            "-title", alert.title,
            "-message", alert.message,
            "-timeout", str(alert.timeout),
            "-sound", alert.sound,
            "-group", alert.group,
        ])

    def remove(self, group: str) -> None:
        self._run(["-remove", group])

    def _run(self, args: list[str]) -> None:
        command = [self.binary, *args]
        logger.debug("Running %s", " ".join(command))
        try:
            subprocess.run(
                command,
                check=True,
                capture_output=True,
                text=True,
                timeout=self.command_timeout,
            )
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or "").strip() or f"exit status {e.returncode}"
            raise NotificationError(f"{self.binary} failed: {detail}") from e
        except subprocess.TimeoutExpired as e:
            raise NotificationError(f"{self.binary} timed out") from e
        except OSError as e:
            raise NotificationError(f"Could not run {self.binary}: {e}") from e


def failure_alert(number: int, title: str, context: str, timeout: int = 10, sound: str = "default") -> Alert:
    """Build the alert for a failing CI context on a pull request."""
    return Alert(
        title=f"PR #{number} CI Failure",
        message=f"CI: {context}\nPR: {title}",
        group=f"PR-{number}",
        context=context,
        timeout=timeout,
        sound=sound,
    )


def merge_alert(number: int, title: str, timeout: int = 10, sound: str = "default") -> Alert:
    """Build the alert for a merged pull request."""
    return Alert(
        title=f"PR #{number} Merged",
        message=f"PR: {title}",
        group=f"PR-{number}",
        timeout=timeout,
        sound=sound,
    )
