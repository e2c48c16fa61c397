"""ci-alert resource clients."""

from ci_alert.clients.pulls import PullsClient
from ci_alert.clients.statuses import StatusesClient

__all__ = [
    "PullsClient",
    "StatusesClient",
]
