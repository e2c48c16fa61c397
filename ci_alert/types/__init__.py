"""ci-alert type definitions.

This module exports all data model types used by ci-alert.
"""

from ci_alert.types.notifications import Alert
from ci_alert.types.pulls import PullRequest
from ci_alert.types.statuses import StatusEntry

__all__ = [
    "PullRequest",
    "StatusEntry",
    "Alert",
]
