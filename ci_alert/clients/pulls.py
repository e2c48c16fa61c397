"""Pull requests resource client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ci_alert.clients._timestamps import parse_timestamp
from ci_alert.exceptions import InvalidResponseError
from ci_alert.types.pulls import PullRequest

if TYPE_CHECKING:
    from ci_alert.transport import HTTPTransport


class PullsClient:
    """Client for pull request operations."""

    def __init__(self, transport: HTTPTransport) -> None:
        """
        Initialize the pulls client.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    def list(
        self,
        owner: str,
        repo: str,
        state: str = "open",
        page: int = 1,
        per_page: int = 100,
        sort: str = "created",
        direction: str = "desc",
    ) -> list[PullRequest]:
        """
        List one page of pull requests.

        Args:
            owner: Repository owner
            repo: Repository name
            state: "open", "closed" or "all" (default: "open")
            page: 1-based page number
            per_page: Page size (max 100)
            sort: Sort key (default: "created")
            direction: "asc" or "desc" (default: "desc", newest first)

        Returns:
            List of PullRequest objects. ``merged`` is not reliable here.

        Raises:
            NotFoundError: If the repository is not found
            InvalidResponseError: If the response is not a list of pull requests
        """
        params = {
            "state": state,
            "sort": sort,
            "direction": direction,
            "page": page,
            "per_page": per_page,
        }

        response = self.transport.get(f"/repos/{owner}/{repo}/pulls", params=params)
        if response is None:
            return []
        if not isinstance(response, list):
            raise InvalidResponseError(
                f"Expected a list of pull requests, got {type(response).__name__}"
            )

        return [self._parse_pull_request(pr) for pr in response]

    def get(self, owner: str, repo: str, number: int) -> PullRequest:
        """
        Get pull request detail, including the authoritative merged flag.

        Args:
            owner: Repository owner
            repo: Repository name
            number: Pull request number

        Returns:
            PullRequest with full details

        Raises:
            NotFoundError: If the pull request is not found
        """
        data = self.transport.get(f"/repos/{owner}/{repo}/pulls/{number}")
        return self._parse_pull_request(data)

    def _parse_pull_request(self, data: dict[str, Any]) -> PullRequest:
        """Parse pull request data from API response."""
        try:
            merged_at = None
            if data.get("merged_at"):
                merged_at = parse_timestamp(data["merged_at"])

            return PullRequest(
                number=data["number"],
                author_login=(data.get("user") or {}).get("login", ""),
                created_at=parse_timestamp(data["created_at"]),
                head_sha=(data.get("head") or {}).get("sha", ""),
                title=data.get("title", ""),
                merged=bool(data.get("merged", False)),
                state=data.get("state", "open"),
                html_url=data.get("html_url"),
                merged_at=merged_at,
            )
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise InvalidResponseError(f"Malformed pull request: {e!r}") from e
