"""
Merge triggering.

Issues the accept-merge call once quorum is reached and turns every
possible answer into a logged MergeResult. Nothing raised by the GitLab
client escapes ``try_merge``: the webhook response has already been sent
by the time it runs.
"""

from enum import Enum
from typing import TYPE_CHECKING

from lgtmbot.exceptions import (
    GitLabAPIError,
    MergeConflictError,
    MergeNotAcceptableError,
)
from lgtmbot.logging import get_logger
from lgtmbot.types.events import MERGE_STATUS_CAN_BE_MERGED
from lgtmbot.types.merge import MergeOutcome, MergeResult

if TYPE_CHECKING:
    from lgtmbot.client import GitLabClient

logger = get_logger()


class RemoveSourceBranchPolicy(str, Enum):
    """Which value to send as ``should_remove_source_branch``."""

    ALWAYS = "always"  # always "true", whatever the merge request says
    EVENT = "event"  # the merge request's force_remove_source_branch flag
    NEVER = "never"

    def resolve(self, requested: bool) -> bool:
        if self is RemoveSourceBranchPolicy.ALWAYS:
            return True
        if self is RemoveSourceBranchPolicy.NEVER:
            return False
        return requested


class MergeTrigger:
    """Accept merge requests through the GitLab client."""

    def __init__(
        self,
        client: "GitLabClient",
        remove_source_branch: RemoveSourceBranchPolicy = RemoveSourceBranchPolicy.ALWAYS,
    ) -> None:
        self.client = client
        self.remove_source_branch = RemoveSourceBranchPolicy(remove_source_branch)

    def try_merge(
        self,
        project_id: int,
        target_id: int,
        remove_source_branch: bool,
        mergeability: str,
    ) -> MergeResult | None:
        """
        Accept a merge request if GitLab reported it mergeable.

        Args:
            project_id: The owning project id
            target_id: The merge request id
            remove_source_branch: The merge request's own remove-branch flag
            mergeability: ``merge_status`` from the triggering event

        Returns:
            The MergeResult, or None when the merge request was not mergeable
            and no call was made
        """
        if mergeability != MERGE_STATUS_CAN_BE_MERGED:
            logger.info(
                "merge request %d is %r, not merging", target_id, mergeability or "unknown"
            )
            return None

        should_remove = self.remove_source_branch.resolve(remove_source_branch)
        logger.info("merge request %d can be merged, accepting", target_id)

        try:
            result = self.client.merge_requests.accept(project_id, target_id, should_remove)
        except MergeConflictError as e:
            logger.warning(
                "merge request %d has some conflicts and can not be merged", target_id
            )
            return MergeResult(project_id, target_id, MergeOutcome.CONFLICT, e.status_code, e.message)
        except MergeNotAcceptableError as e:
            logger.warning("merge request %d is already merged or closed", target_id)
            return MergeResult(
                project_id, target_id, MergeOutcome.NOT_ACCEPTABLE, e.status_code, e.message
            )
        except GitLabAPIError as e:
            logger.error(
                "accept merge request %d failed: status=%s, error=%s",
                target_id,
                e.status_code if e.status_code is not None else "-",
                e,
            )
            return MergeResult(project_id, target_id, MergeOutcome.FAILED, e.status_code, str(e))

        logger.info("accept merge request %d successfully", target_id)
        return result
