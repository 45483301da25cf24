"""
Pytest plugin for lgtmbot testing fixtures.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["lgtmbot.testing.conftest"]
"""

from lgtmbot.testing.fixtures import (
    bot_config,
    mock_gitlab_client,
    sample_event,
    sample_note_payload,
)

__all__ = [
    "bot_config",
    "mock_gitlab_client",
    "sample_event",
    "sample_note_payload",
]
