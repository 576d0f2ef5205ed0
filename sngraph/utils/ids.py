from __future__ import annotations

from collections import Counter
from typing import Hashable, Tuple


class IdAllocator:
    """Issues identifiers for the nodes of one network construction.

    Each node receives a per-kind id (dense, starting at 1 for every kind) and
    a network-wide ``uuid`` (dense, starting at 1 in construction order). A new
    allocator is created for every construction, so separate networks never
    share counters.

    Example:
        ids = IdAllocator()
        ids.allocate("data")     # (1, 1)
        ids.allocate("storage")  # (1, 2)
        ids.allocate("data")     # (2, 3)
    """

    def __init__(self) -> None:
        self._per_kind: Counter = Counter()
        self._uuid = 0

    def allocate(self, kind: Hashable) -> Tuple[int, int]:
        """Return ``(kind_id, uuid)`` for the next node of ``kind``."""
        self._per_kind[kind] += 1
        self._uuid += 1
        return self._per_kind[kind], self._uuid

    def count(self, kind: Hashable) -> int:
        """Return how many ids were issued for ``kind``."""
        return self._per_kind[kind]

    @property
    def total(self) -> int:
        """Number of uuids issued so far."""
        return self._uuid
