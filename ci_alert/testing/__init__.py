"""ci-alert testing utilities.

Provides a mock client, a recording notifier and fixtures for testing code
that uses ci-alert.
"""

from ci_alert.testing.fixtures import (
    FIXED_NOW,
    create_mock_pull_request,
    create_mock_status,
)
from ci_alert.testing.mock import (
    MockCall,
    MockGitHubClient,
    MockResponse,
    RecordingNotifier,
)

__all__ = [
    # Mocks
    "MockGitHubClient",
    "MockCall",
    "MockResponse",
    "RecordingNotifier",
    # Helper functions
    "FIXED_NOW",
    "create_mock_pull_request",
    "create_mock_status",
]
