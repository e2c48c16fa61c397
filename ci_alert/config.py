"""
Watch configuration.

Defaults describe the single repository/author pair being watched; every value
can be overridden from the environment or the command line.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import timedelta
from typing import Any

from ci_alert.exceptions import ConfigurationError

DEFAULT_EXCLUDED_CONTEXTS = frozenset({"PR-CI-Kunlun-R200"})


@dataclass(frozen=True)
class WatchConfig:
    """What to watch, how often, and how loudly to alert."""

    owner: str = "PaddlePaddle"
    repo: str = "Paddle"
    author: str = "GoldenStain"
    poll_interval: float = 360.0  # seconds between rounds
    window_days: int = 7  # only PRs created within this many days are tracked
    page_size: int = 100
    excluded_contexts: frozenset[str] = field(
        default_factory=lambda: DEFAULT_EXCLUDED_CONTEXTS
    )
    refresh_each_round: bool = True
    failure_repeat: int = 3
    merge_repeat: int = 1
    repeat_interval: float = 2.0  # seconds between repeated notifications
    notification_timeout: int = 10
    notification_sound: str = "default"
    request_timeout: float = 30.0

    def __post_init__(self) -> None:
        if not self.owner or not self.repo:
            raise ConfigurationError("Repository owner and name are required")
        if not self.author:
            raise ConfigurationError("Author login is required")
        if self.poll_interval <= 0:
            raise ConfigurationError(
                f"Poll interval must be positive, got {self.poll_interval}"
            )
        if self.window_days <= 0:
            raise ConfigurationError(
                f"Window must be at least one day, got {self.window_days}"
            )
        if not 1 <= self.page_size <= 100:
            raise ConfigurationError(
                f"Page size must be between 1 and 100, got {self.page_size}"
            )
        if self.failure_repeat < 1 or self.merge_repeat < 1:
            raise ConfigurationError("Notification repeat counts must be at least 1")

    @property
    def window(self) -> timedelta:
        return timedelta(days=self.window_days)

    @property
    def full_repo(self) -> str:
        return f"{self.owner}/{self.repo}"

    def with_overrides(self, **overrides: Any) -> "WatchConfig":
        """Return a copy with every non-None override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        if "excluded_contexts" in changes:
            changes["excluded_contexts"] = frozenset(changes["excluded_contexts"])
        return replace(self, **changes)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "WatchConfig":
        """
        Create a configuration from environment variables.

        Environment variables (all optional):
            CI_ALERT_OWNER: Repository owner
            CI_ALERT_REPO: Repository name
            CI_ALERT_AUTHOR: Pull request author login
            CI_ALERT_POLL_INTERVAL: Seconds between rounds
            CI_ALERT_WINDOW_DAYS: Recency window in days
            CI_ALERT_EXCLUDE: Comma-separated non-required CI contexts

        Raises:
            ConfigurationError: If a numeric variable cannot be parsed
        """
        env = os.environ if environ is None else environ

        overrides: dict[str, Any] = {
            "owner": env.get("CI_ALERT_OWNER") or None,
            "repo": env.get("CI_ALERT_REPO") or None,
            "author": env.get("CI_ALERT_AUTHOR") or None,
            "poll_interval": _number(env, "CI_ALERT_POLL_INTERVAL", float),
            "window_days": _number(env, "CI_ALERT_WINDOW_DAYS", int),
        }

        exclude = env.get("CI_ALERT_EXCLUDE")
        if exclude is not None:
            overrides["excluded_contexts"] = [
                name.strip() for name in exclude.split(",") if name.strip()
            ]

        return cls().with_overrides(**overrides)


def _number(env: Mapping[str, str], key: str, kind: type) -> Any:
    raw = env.get(key)
    if not raw:
        return None
    try:
        return kind(raw)
    except ValueError as e:
        raise ConfigurationError(f"Invalid {key}: {raw!r}") from e
