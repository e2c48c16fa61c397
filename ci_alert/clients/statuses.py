"""Commit statuses resource client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ci_alert.clients._timestamps import parse_timestamp
from ci_alert.exceptions import InvalidResponseError
from ci_alert.types.statuses import StatusEntry

if TYPE_CHECKING:
    from ci_alert.transport import HTTPTransport


class StatusesClient:
    """Client for commit status operations."""

    MAX_PAGE_SIZE = 100

    def __init__(self, transport: HTTPTransport) -> None:
        self.transport = transport

    def list(
        self,
        owner: str,
        repo: str,
        ref: str,
        page: int = 1,
        per_page: int = MAX_PAGE_SIZE,
    ) -> list[StatusEntry]:
        """
        List one page of statuses for a ref, newest first.

        Args:
            owner: Repository owner
            repo: Repository name
            ref: Commit SHA, branch or tag name
            page: 1-based page number
            per_page: Page size (max 100)

        Returns:
            List of StatusEntry objects

        Raises:
            NotFoundError: If the ref is not found
            InvalidResponseError: If the response is not a list of statuses
        """
        response = self.transport.get(
            f"/repos/{owner}/{repo}/commits/{ref}/statuses",
            params={"page": page, "per_page": per_page},
        )
        if response is None:
            return []
        if not isinstance(response, list):
            raise InvalidResponseError(
                f"Expected a list of statuses for {ref}, got {type(response).__name__}"
            )

        return [self._parse_status(status) for status in response]

    def list_all(self, owner: str, repo: str, ref: str) -> list[StatusEntry]:
        """
        List the full status history for a ref, following pagination.

        Statuses are append-only, so a context re-run several times appears
        several times.
        """
        entries: list[StatusEntry] = []
        page = 1
        while True:
            batch = self.list(owner, repo, ref, page=page, per_page=self.MAX_PAGE_SIZE)
            entries.extend(batch)
            if len(batch) < self.MAX_PAGE_SIZE:
                return entries
            page += 1

    def _parse_status(self, data: dict[str, Any]) -> StatusEntry:
        """Parse status data from API response."""
        try:
            return StatusEntry(
                context=data.get("context", "default"),
                state=data["state"],
                updated_at=parse_timestamp(data.get("updated_at") or data["created_at"]),
                description=data.get("description"),
                target_url=data.get("target_url"),
            )
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise InvalidResponseError(f"Malformed status entry: {e!r}") from e
