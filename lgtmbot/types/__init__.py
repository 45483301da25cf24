"""lgtmbot type definitions."""

from lgtmbot.types.events import (
    MERGE_STATUS_CAN_BE_MERGED,
    NOTEABLE_TYPE_MERGE_REQUEST,
    OBJECT_KIND_NOTE,
    ApprovalEvent,
)
from lgtmbot.types.merge import MergeOutcome, MergeResult

__all__ = [
    # Inbound events
    "ApprovalEvent",
    "OBJECT_KIND_NOTE",
    "NOTEABLE_TYPE_MERGE_REQUEST",
    "MERGE_STATUS_CAN_BE_MERGED",
    # Merge outcomes
    "MergeOutcome",
    "MergeResult",
]
