"""
Approval dispatching.

Connects the classifier, the quorum tracker and the merge trigger for one
inbound event. The counter lock is held only inside the store; the merge
call runs afterwards, on the executor when one is configured.
"""

from concurrent.futures import Executor, Future
from dataclasses import dataclass

from lgtmbot.classifier import EventClassifier
from lgtmbot.logging import get_logger, log_webhook_event
from lgtmbot.merge import MergeTrigger
from lgtmbot.quorum import QuorumTracker
from lgtmbot.types.events import ApprovalEvent
from lgtmbot.types.merge import MergeResult

logger = get_logger()


@dataclass
class DispatchResult:
    """What happened to one inbound event."""

    qualified: bool
    count: int | None = None
    merge_triggered: bool = False
    merge_result: MergeResult | None = None


class ApprovalDispatcher:
    """
    Route comment events through the approval workflow.

    Args:
        tracker: Quorum tracker owning the approval counts
        trigger: Merge trigger used once quorum is reached
        classifier: Approval keyword classifier (default: "LGTM")
        executor: Runs merge calls off the caller's thread; None runs them inline
        dedupe_merges: Fire the trigger at most once per merge request
        require_distinct_approvers: Count each comment author once per merge request
    """

    def __init__(
        self,
        tracker: QuorumTracker,
        trigger: MergeTrigger,
        classifier: EventClassifier | None = None,
        executor: Executor | None = None,
        dedupe_merges: bool = False,
        require_distinct_approvers: bool = False,
    ) -> None:
        self.tracker = tracker
        self.trigger = trigger
        self.classifier = classifier or EventClassifier()
        self.executor = executor
        self.dedupe_merges = dedupe_merges
        self.require_distinct_approvers = require_distinct_approvers

    def handle(self, event: ApprovalEvent) -> DispatchResult:
        """
        Process one event.

        Returns:
            DispatchResult; ``merge_result`` is only set when the merge ran inline
        """
        log_webhook_event(event)

        if not self.classifier.qualifies(event):
            return DispatchResult(qualified=False)

        approver = None
        if self.require_distinct_approvers:
            if event.author is None:
                logger.warning(
                    "approval on merge request %d has no author, not counted",
                    event.target_id,
                )
                return DispatchResult(qualified=True, count=self.tracker.count(event.target_id))
            approver = event.author

        count = self.tracker.record_approval(event.target_id, approver)

        if not (self.tracker.is_quorum(count) and event.can_be_merged):
            return DispatchResult(qualified=True, count=count)

        if self.dedupe_merges and not self.tracker.store.mark_merge_attempted(event.target_id):
            logger.info(
                "merge request %d was already submitted for merging, skipping",
                event.target_id,
            )
            return DispatchResult(qualified=True, count=count)

        if self.executor is None:
            result = self._merge(event)
            return DispatchResult(
                qualified=True, count=count, merge_triggered=True, merge_result=result
            )

        future = self.executor.submit(self._merge, event)
        future.add_done_callback(_log_unexpected_failure)
        return DispatchResult(qualified=True, count=count, merge_triggered=True)

    def _merge(self, event: ApprovalEvent) -> MergeResult | None:
        return self.trigger.try_merge(
            event.project_id,
            event.target_id,
            event.remove_source_branch,
            event.mergeability,
        )


def _log_unexpected_failure(future: Future) -> None:
    if future.cancelled():
        return
    error = future.exception()
    if error is not None:
        logger.error("merge call crashed: %s", error, exc_info=error)
