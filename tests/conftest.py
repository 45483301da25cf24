"""Shared fixtures for the lgtmbot test suite."""

from lgtmbot.testing.fixtures import (  # noqa: F401
    bot_config,
    mock_gitlab_client,
    sample_event,
    sample_note_payload,
)
