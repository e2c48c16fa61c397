"""Commit status data models."""

from dataclasses import dataclass
from datetime import datetime

FAILURE = "failure"


@dataclass
class StatusEntry:
    """A single status reported by a CI context on a commit.

    The same context may report many times as checks are re-run; only the
    most recently updated entry per context is authoritative.
    """

    context: str
    state: str  # "success", "failure", "pending", "error"
    updated_at: datetime
    description: str | None = None
    target_url: str | None = None

    @property
    def is_failure(self) -> bool:
        return self.state == FAILURE
