"""Memo of pairwise minimum path costs."""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from sngraph.model.nodes import SensorNode

PairKey = Tuple[SensorNode, SensorNode]


class PathCostCache:
    """Unbounded cache of minimum path costs keyed by ordered node pair.

    ``(a, b)`` and ``(b, a)`` are distinct entries: hop costs include the
    receiving cost of the hop's head, so reversing a path can change its cost.

    Attributes:
        hits: Lookups answered from the cache.
        misses: Lookups that found no entry.
    """

    def __init__(self) -> None:
        self._costs: Dict[PairKey, int] = {}
        self.hits = 0
        self.misses = 0

    def get(self, src: SensorNode, dst: SensorNode) -> Optional[int]:
        """Return the cached cost of ``src -> dst`` or None."""
        cost = self._costs.get((src, dst))
        if cost is None:
            self.misses += 1
        else:
            self.hits += 1
        return cost

    def put(self, src: SensorNode, dst: SensorNode, cost: int) -> None:
        self._costs[(src, dst)] = cost

    def clear(self) -> None:
        """Drop every entry. Hit/miss counters are kept."""
        self._costs.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._costs

    def __len__(self) -> int:
        return len(self._costs)
