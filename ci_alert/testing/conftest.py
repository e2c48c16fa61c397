"""
Pytest plugin for ci-alert testing fixtures.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["ci_alert.testing.conftest"]
"""

from ci_alert.testing.fixtures import (
    mock_client,
    recording_notifier,
    sample_pull_request,
    sample_statuses,
    watch_config,
)

__all__ = [
    "mock_client",
    "recording_notifier",
    "watch_config",
    "sample_pull_request",
    "sample_statuses",
]
