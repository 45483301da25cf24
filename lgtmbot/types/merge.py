"""Merge attempt outcome models."""

from dataclasses import dataclass
from enum import Enum


class MergeOutcome(str, Enum):
    """How GitLab answered an accept-merge request."""

    MERGED = "merged"  # 200
    CONFLICT = "conflict"  # 405
    NOT_ACCEPTABLE = "not_acceptable"  # 406, already merged or closed
    FAILED = "failed"


@dataclass
class MergeResult:
    """Result of one merge attempt."""

    project_id: int
    target_id: int
    outcome: MergeOutcome
    status_code: int | None = None
    detail: str = ""

    @property
    def merged(self) -> bool:
        return self.outcome is MergeOutcome.MERGED
