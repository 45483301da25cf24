"""Approval quorum tracking."""

from lgtmbot.exceptions import ConfigurationError
from lgtmbot.logging import get_logger
from lgtmbot.store import ApprovalStore, InMemoryApprovalStore

QUORUM_THRESHOLD = 2

logger = get_logger("quorum")


class QuorumTracker:
    """
    Tally approvals per merge request and evaluate the quorum predicate.

    The threshold is fixed when the tracker is built. The store performs
    the atomic read-increment-write; the count returned by
    ``record_approval`` is the value immediately after this approval.
    """

    def __init__(
        self,
        store: ApprovalStore | None = None,
        threshold: int = QUORUM_THRESHOLD,
    ) -> None:
        if threshold < 1:
            raise ConfigurationError("quorum threshold must be at least 1")

        self.store = store if store is not None else InMemoryApprovalStore()
        self._threshold = threshold

    @property
    def threshold(self) -> int:
        return self._threshold

    def record_approval(self, target_id: int, approver: str | None = None) -> int:
        """
        Apply one approval to ``target_id``.

        Args:
            target_id: The merge request id
            approver: Username to de-duplicate on, or None to count every vote

        Returns:
            The approval count right after this vote
        """
        count = self.store.increment(target_id, approver)
        logger.info(
            "merge request %d has %d/%d approvals", target_id, count, self._threshold
        )
        return count

    def is_quorum(self, count: int) -> bool:
        return count >= self._threshold

    def count(self, target_id: int) -> int:
        return self.store.count(target_id)
