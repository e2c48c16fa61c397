"""Pull request data models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class PullRequest:
    """Pull request information.

    ``merged`` is only authoritative on a detail fetch; the summary listing
    does not reliably carry it.
    """

    number: int
    author_login: str
    created_at: datetime
    head_sha: str
    title: str
    merged: bool = False
    state: str = "open"  # "open", "closed"
    html_url: str | None = None
    merged_at: datetime | None = None

    @property
    def is_closed(self) -> bool:
        return self.state == "closed"
