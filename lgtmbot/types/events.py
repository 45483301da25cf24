"""Inbound GitLab comment event model."""

from dataclasses import dataclass
from typing import Any

OBJECT_KIND_NOTE = "note"
NOTEABLE_TYPE_MERGE_REQUEST = "MergeRequest"
MERGE_STATUS_CAN_BE_MERGED = "can_be_merged"


def _section(data: Any, key: str) -> dict[str, Any]:
    value = data.get(key) if isinstance(data, dict) else None
    return value if isinstance(value, dict) else {}


def _str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


def _int(data: dict[str, Any], key: str) -> int:
    value = data.get(key)
    # bool is an int subclass; GitLab never sends ids as booleans
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return value


@dataclass(frozen=True)
class ApprovalEvent:
    """A comment event as seen by the approval workflow.

    Only the subset of the GitLab note hook payload the bot reads is kept.
    Missing or mistyped fields fall back to empty values so a partially
    populated payload simply fails classification.
    """

    kind: str
    target_kind: str
    comment_text: str
    target_id: int
    project_id: int
    mergeability: str
    remove_source_branch: bool = False
    author: str | None = None
    target_iid: int | None = None
    title: str | None = None

    @property
    def can_be_merged(self) -> bool:
        """Whether GitLab reported the merge request as mergeable."""
        return self.mergeability == MERGE_STATUS_CAN_BE_MERGED

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "ApprovalEvent":
        """Build an event from a decoded note hook body."""
        attributes = _section(payload, "object_attributes")
        merge_request = _section(payload, "merge_request")
        merge_params = _section(merge_request, "merge_params")
        user = _section(payload, "user")

        iid = _int(merge_request, "iid")
        force_remove = merge_params.get("force_remove_source_branch")

        return cls(
            kind=_str(payload, "object_kind"),
            target_kind=_str(attributes, "noteable_type"),
            comment_text=_str(attributes, "note"),
            target_id=_int(merge_request, "id"),
            project_id=_int(payload, "project_id"),
            mergeability=_str(merge_request, "merge_status"),
            # GitLab has sent this flag both as a boolean and as "1"/"0"
            remove_source_branch=force_remove is True or force_remove in ("1", "true"),
            author=_str(user, "username") or None,
            target_iid=iid or None,
            title=_str(merge_request, "title") or None,
        )
