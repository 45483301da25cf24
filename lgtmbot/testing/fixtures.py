"""
Pytest fixtures for lgtmbot testing.

Provides note hook payloads and mock clients for tests of the approval
workflow.
"""

from collections.abc import Generator
from typing import Any

import pytest

from lgtmbot.config import BotConfig
from lgtmbot.testing.mock import MockGitLabClient
from lgtmbot.types.events import ApprovalEvent


def create_note_payload(
    merge_request_id: int = 42,
    project_id: int = 7,
    note: str = "LGTM",
    object_kind: str = "note",
    noteable_type: str = "MergeRequest",
    merge_status: str = "can_be_merged",
    force_remove_source_branch: bool = False,
    username: str = "reviewer",
) -> dict[str, Any]:
    """Build a GitLab note hook body for a comment on a merge request."""
    return {
        "object_kind": object_kind,
        "user": {"name": username.title(), "username": username},
        "project_id": project_id,
        "project": {
            "name": "demo",
            "path_with_namespace": "group/demo",
            "web_url": "https://gitlab.example.com/group/demo",
        },
        "object_attributes": {
            "id": 1244,
            "note": note,
            "noteable_type": noteable_type,
            "author_id": 1,
            "project_id": project_id,
            "noteable_id": merge_request_id,
            "system": False,
            "url": "https://gitlab.example.com/group/demo/merge_requests/1#note_1244",
        },
        "repository": {
            "name": "demo",
            "url": "git@gitlab.example.com:group/demo.git",
        },
        "merge_request": {
            "id": merge_request_id,
            "iid": 1,
            "target_branch": "master",
            "source_branch": "feature",
            "source_project_id": project_id,
            "target_project_id": project_id,
            "title": "Add feature",
            "state": "opened",
            "merge_status": merge_status,
            "merge_params": {"force_remove_source_branch": force_remove_source_branch},
        },
    }


def create_mock_event(**kwargs: Any) -> ApprovalEvent:
    """Build an ApprovalEvent through ``create_note_payload``."""
    return ApprovalEvent.from_payload(create_note_payload(**kwargs))


# ============================================================================
# Mock Client Fixtures
# ============================================================================


@pytest.fixture
def mock_gitlab_client() -> Generator[MockGitLabClient, None, None]:
    """Provide a MockGitLabClient for testing."""
    client = MockGitLabClient()
    yield client
    client.reset()


# ============================================================================
# Payload Fixtures
# ============================================================================


@pytest.fixture
def sample_note_payload() -> dict[str, Any]:
    """A qualifying LGTM comment on mergeable merge request 42."""
    return create_note_payload()


@pytest.fixture
def sample_event(sample_note_payload: dict[str, Any]) -> ApprovalEvent:
    return ApprovalEvent.from_payload(sample_note_payload)


@pytest.fixture
def bot_config() -> BotConfig:
    """A valid configuration pointing at a fictional GitLab instance."""
    return BotConfig(
        private_token="test-private-token",
        gitlab_url="https://gitlab.example.com",
    )
