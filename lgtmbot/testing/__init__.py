"""lgtmbot testing utilities.

Provides a mock GitLab client and payload builders for testing the approval
workflow.
"""

from lgtmbot.testing.fixtures import create_mock_event, create_note_payload
from lgtmbot.testing.mock import MockCall, MockGitLabClient, MockResponse

__all__ = [
    # Mock client
    "MockGitLabClient",
    "MockCall",
    "MockResponse",
    # Helper functions
    "create_note_payload",
    "create_mock_event",
]
