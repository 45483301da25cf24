"""
Approval counter stores.

A store owns the per-merge-request approval counts for the life of the
process. Every mutation is a read-modify-write performed under the store's
lock, so concurrent webhook threads never lose an increment.
"""

import threading
from abc import ABC, abstractmethod
from collections import OrderedDict

from lgtmbot.exceptions import ConfigurationError


class ApprovalStore(ABC):
    """Interface for approval counter containers."""

    @abstractmethod
    def increment(self, target_id: int, approver: str | None = None) -> int:
        """
        Record one approval and return the count right after it.

        When ``approver`` is given and has already approved ``target_id``,
        nothing changes and the current count is returned.
        """

    @abstractmethod
    def count(self, target_id: int) -> int:
        """Current approval count for a target (0 if never approved)."""

    @abstractmethod
    def mark_merge_attempted(self, target_id: int) -> bool:
        """Set the merge-attempted marker; True only for the first caller."""

    @abstractmethod
    def snapshot(self) -> dict[int, int]:
        """Copy of all counts."""

    @abstractmethod
    def __len__(self) -> int:
        """Number of targets currently tracked."""


class InMemoryApprovalStore(ApprovalStore):
    """
    Dictionary-backed store guarded by a single lock.

    Counts are never decremented. Targets are never forgotten unless
    ``max_targets`` is set, in which case the least recently approved
    target is evicted once the bound is exceeded.
    """

    def __init__(self, max_targets: int | None = None) -> None:
        if max_targets is not None and max_targets < 1:
            raise ConfigurationError("max_targets must be a positive integer")

        self.max_targets = max_targets
        self._lock = threading.Lock()
        self._counts: OrderedDict[int, int] = OrderedDict()
        self._approvers: dict[int, set[str]] = {}
        self._merge_attempted: set[int] = set()

    def increment(self, target_id: int, approver: str | None = None) -> int:
        with self._lock:
            if approver is not None:
                seen = self._approvers.setdefault(target_id, set())
                if approver in seen:
                    return self._counts.get(target_id, 0)
                seen.add(approver)

            count = self._counts.get(target_id, 0) + 1
            self._counts[target_id] = count
            self._counts.move_to_end(target_id)

            if self.max_targets is not None:
                while len(self._counts) > self.max_targets:
                    evicted, _ = self._counts.popitem(last=False)
                    self._approvers.pop(evicted, None)
                    self._merge_attempted.discard(evicted)

            return count

    def count(self, target_id: int) -> int:
        with self._lock:
            return self._counts.get(target_id, 0)

    def mark_merge_attempted(self, target_id: int) -> bool:
        with self._lock:
            if target_id in self._merge_attempted:
                return False
            self._merge_attempted.add(target_id)
            return True

    def snapshot(self) -> dict[int, int]:
        with self._lock:
            return dict(self._counts)

    def __len__(self) -> int:
        with self._lock:
            return len(self._counts)


class ShardedApprovalStore(ApprovalStore):
    """
    Store partitioned into independently locked shards.

    A target always maps to the same shard, so per-target atomicity holds
    while approvals on different shards proceed in parallel.
    ``max_targets`` is split evenly across shards and each shard evicts on
    its own, so the total never exceeds it but may fall short of it when
    targets hash unevenly.
    """

    def __init__(self, shards: int = 8, max_targets: int | None = None) -> None:
        if shards < 1:
            raise ConfigurationError("shards must be a positive integer")
        if max_targets is not None and max_targets < shards:
            raise ConfigurationError("max_targets must be at least the number of shards")

        per_shard = None
        if max_targets is not None:
            per_shard = max_targets // shards

        self._shards = [InMemoryApprovalStore(per_shard) for _ in range(shards)]

    def _shard(self, target_id: int) -> InMemoryApprovalStore:
        return self._shards[hash(target_id) % len(self._shards)]

    def increment(self, target_id: int, approver: str | None = None) -> int:
        return self._shard(target_id).increment(target_id, approver)

    def count(self, target_id: int) -> int:
        return self._shard(target_id).count(target_id)

    def mark_merge_attempted(self, target_id: int) -> bool:
        return self._shard(target_id).mark_merge_attempted(target_id)

    def snapshot(self) -> dict[int, int]:
        result: dict[int, int] = {}
        for shard in self._shards:
            result.update(shard.snapshot())
        return result

    def __len__(self) -> int:
        return sum(len(shard) for shard in self._shards)


def create_store(shards: int = 1, max_targets: int | None = None) -> ApprovalStore:
    """Build the single-lock store, or a sharded one when ``shards > 1``."""
    if shards == 1:
        return InMemoryApprovalStore(max_targets=max_targets)
    return ShardedApprovalStore(shards=shards, max_targets=max_targets)
