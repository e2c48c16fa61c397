"""Timestamp parsing shared by the resource clients."""

from datetime import datetime, timezone


def parse_timestamp(value: str) -> datetime:
    """Parse a GitHub ISO 8601 timestamp ("2024-01-15T10:30:00Z") as aware UTC."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
