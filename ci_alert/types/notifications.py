"""Notification data models."""

from dataclasses import dataclass


@dataclass
class Alert:
    """A desktop notification to be shown by a Notifier."""

    title: str
    message: str
    group: str  # notifications sharing a group replace each other
    context: str | None = None  # CI context that triggered the alert, if any
    timeout: int = 10
    sound: str = "default"
