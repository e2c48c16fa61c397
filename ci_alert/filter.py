"""Selection of recent pull requests by one author."""

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from ci_alert.logging import get_logger
from ci_alert.types.pulls import PullRequest

if TYPE_CHECKING:
    from ci_alert.clients.pulls import PullsClient

logger = get_logger("filter")

DEFAULT_WINDOW = timedelta(days=7)
DEFAULT_PAGE_SIZE = 100


def find_recent_pull_requests(
    pulls: "PullsClient",
    owner: str,
    repo: str,
    author: str,
    window: timedelta = DEFAULT_WINDOW,
    page_size: int = DEFAULT_PAGE_SIZE,
    now: datetime | None = None,
) -> list[PullRequest]:
    """
    Find open pull requests by ``author`` created within ``window``.

    Pages are requested newest-created first. Scanning stops at the first
    pull request created at or before the cutoff, and no further page is
    fetched; everything after it is older still.

    Args:
        pulls: Pulls resource client
        owner: Repository owner
        repo: Repository name
        author: Author login to keep
        window: Recency window (default: 7 days)
        page_size: Pull requests per page (default: 100)
        now: Reference time (default: current UTC time)

    Returns:
        Matching pull requests, newest first

    Raises:
        CIAlertError: If any page fetch fails; nothing is returned in that case
    """
    cutoff = (now or datetime.now(timezone.utc)) - window
    found: list[PullRequest] = []
    page = 1

    while True:
        batch = pulls.list(owner, repo, state="open", page=page, per_page=page_size)
        if not batch:
            break

        for pr in batch:
            if pr.created_at <= cutoff:
                logger.debug(
                    "PR #%d created %s is outside the window, stopping at page %d",
                    pr.number, pr.created_at.isoformat(), page,
                )
                logger.info("Found %d recent PRs by %s in %s/%s", len(found), author, owner, repo)
                return found
            if pr.author_login == author:
                found.append(pr)

        if len(batch) < page_size:
            break

        page += 1

    logger.info("Found %d recent PRs by %s in %s/%s", len(found), author, owner, repo)
    return found
