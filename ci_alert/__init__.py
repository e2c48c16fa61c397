"""ci-alert - desktop alerts for CI failures and merges on your pull requests."""

from ci_alert.client import GitHubClient
from ci_alert.config import WatchConfig
from ci_alert.evaluator import CIEvaluator, failing_contexts, latest_statuses
from ci_alert.exceptions import (
    AuthenticationError,
    AuthorizationError,
    CIAlertError,
    ConfigurationError,
    InvalidResponseError,
    NotFoundError,
    NotificationError,
    RateLimitedError,
    ServerError,
    ValidationError,
)
from ci_alert.filter import find_recent_pull_requests
from ci_alert.logging import configure_logging, get_logger
from ci_alert.notifier import Notifier, TerminalNotifier
from ci_alert.tracker import MergeStatusTable, MergeTracker
from ci_alert.transport import HTTPTransport, RetryConfig
from ci_alert.types import Alert, PullRequest, StatusEntry
from ci_alert.watcher import PRWatcher, RoundResult

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Client
    "GitHubClient",
    # Watching
    "PRWatcher",
    "RoundResult",
    "WatchConfig",
    "find_recent_pull_requests",
    "CIEvaluator",
    "latest_statuses",
    "failing_contexts",
    "MergeTracker",
    "MergeStatusTable",
    # Notifiers
    "Notifier",
    "TerminalNotifier",
    # Types
    "PullRequest",
    "StatusEntry",
    "Alert",
    # Exceptions
    "CIAlertError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "InvalidResponseError",
    "RateLimitedError",
    "ValidationError",
    "ServerError",
    "ConfigurationError",
    "NotificationError",
    # Transport
    "HTTPTransport",
    "RetryConfig",
    # Logging
    "configure_logging",
    "get_logger",
]
