"""Sensor node model: producers (data), storage and relay (transition) nodes.

All three kinds share a position, a transmission range and identifiers; the
packet/capacity state lives on the concrete subclasses. Nodes compare by
identity so they can be used directly as graph vertices and cache keys.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, List, Optional, Sequence, Tuple

from sngraph.errors import CapacityError
from sngraph.model.energy import CostModel, RadioEnergyModel
from sngraph.utils.ids import IdAllocator


class NodeKind(str, Enum):
    """Node kinds with their ``.sn`` type token as value."""

    DATA = "d"
    STORAGE = "s"
    TRANSITION = "t"

    @property
    def prefix(self) -> str:
        return _PREFIXES[self]


_PREFIXES = {NodeKind.DATA: "DN", NodeKind.STORAGE: "SN", NodeKind.TRANSITION: "TN"}


@dataclass(eq=False)
class SensorNode(ABC):
    """A node placed in the sensor field.

    Attributes:
        id: Dense 1-based id among nodes of the same kind.
        uuid: Dense 1-based id among all nodes of the network.
        x: Horizontal position in meters.
        y: Vertical position in meters.
        transmission_range: Maximum distance of a direct link, in meters.
        cost_model: Energy model used by the ``calculate_*`` methods.
    """

    kind: ClassVar[NodeKind]

    id: int
    uuid: int
    x: float
    y: float
    transmission_range: float
    cost_model: CostModel = field(default_factory=RadioEnergyModel, repr=False)

    @property
    def name(self) -> str:
        """Human-readable name such as ``DN01``."""
        return f"{self.kind.prefix}{self.id:02d}"

    @property
    def position(self) -> Tuple[float, float]:
        return self.x, self.y

    def distance_to(self, other: SensorNode) -> float:
        """Euclidean distance to ``other``."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def in_range_of(self, other: SensorNode) -> bool:
        """True if ``other`` is within this node's transmission range."""
        return self.distance_to(other) <= self.transmission_range

    def calculate_transmission_cost(self, to: SensorNode) -> int:
        """Cost of sending one packet from this node to ``to``."""
        return self.cost_model.transmission_cost(self, to)

    def calculate_receiving_cost(self) -> int:
        """Cost of receiving one packet at this node."""
        return self.cost_model.receiving_cost(self)

    def calculate_storage_cost(self) -> int:
        """Cost of holding one packet at this node."""
        return self.cost_model.storage_cost(self)

    @abstractmethod
    def reset_packets(self) -> None:
        """Restore the node's consumable packet state."""

    def __str__(self) -> str:
        return f"{self.name} ({self.x:.2f}, {self.y:.2f})"


@dataclass(eq=False)
class DataNode(SensorNode):
    """A producer holding overflow packets that must be offloaded.

    ``packet_values`` holds one value per overflow packet; a node loaded from
    a file with a single shared value carries that value once per packet.
    """

    kind: ClassVar[NodeKind] = NodeKind.DATA

    packet_values: List[int] = field(default_factory=list)
    packets_left: int = field(init=False)

    def __post_init__(self) -> None:
        self.packet_values = list(self.packet_values)
        self.packets_left = len(self.packet_values)

    @property
    def overflow_packets(self) -> int:
        return len(self.packet_values)

    @property
    def overflow_packet_value(self) -> int:
        """The node-level packet value: the shared value, or the floored mean."""
        if not self.packet_values:
            return 0
        return sum(self.packet_values) // len(self.packet_values)

    def has_uniform_value(self) -> bool:
        return len(set(self.packet_values)) <= 1

    def set_overflow_packets(self, overflow_packets: int) -> None:
        """Resize the packet list and refill ``packets_left``.

        Growing repeats the last packet value; shrinking drops trailing packets.
        """
        if overflow_packets < 0:
            raise ValueError(f"{self.name}: overflow packets must be non-negative")
        values = self.packet_values[:overflow_packets]
        if len(values) < overflow_packets:
            fill = self.packet_values[-1] if self.packet_values else 0
            values.extend([fill] * (overflow_packets - len(values)))
        self.packet_values = values
        self.packets_left = overflow_packets

    def is_empty(self) -> bool:
        return self.packets_left < 1

    def can_remove_packets(self, packets: int) -> bool:
        return 0 <= packets <= self.packets_left

    def remove_packets(self, packets: int) -> None:
        if packets < 0:
            raise ValueError(f"{self.name}: cannot remove a negative packet count")
        if not self.can_remove_packets(packets):
            raise CapacityError(
                f"{self.name} cannot remove {packets} packets "
                f"({self.packets_left}/{self.overflow_packets} left)",
                requested=packets,
                packets_left=self.packets_left,
            )
        self.packets_left -= packets

    def calculate_storage_cost(self) -> int:
        # Producers never store packets
        return 0

    def reset_packets(self) -> None:
        self.packets_left = self.overflow_packets


@dataclass(eq=False)
class StorageNode(SensorNode):
    """A node able to store up to ``capacity`` packets."""

    kind: ClassVar[NodeKind] = NodeKind.STORAGE

    capacity: int = 0
    space_left: int = field(init=False)

    def __post_init__(self) -> None:
        if self.capacity < 0:
            raise ValueError("capacity must be non-negative")
        self.space_left = self.capacity

    def set_capacity(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError(f"{self.name}: capacity must be non-negative")
        self.capacity = capacity
        self.space_left = capacity

    def is_full(self) -> bool:
        return self.space_left < 1

    def can_store(self, packets: int) -> bool:
        return 0 <= packets <= self.space_left

    def store_packets(self, packets: int) -> None:
        if packets < 0:
            raise ValueError(f"{self.name}: cannot store a negative packet count")
        if not self.can_store(packets):
            raise CapacityError(
                f"{self.name} cannot store {packets} packets "
                f"({self.space_left}/{self.capacity} space left)",
                requested=packets,
                space_left=self.space_left,
            )
        self.space_left -= packets

    def reset_packets(self) -> None:
        self.space_left = self.capacity


@dataclass(eq=False)
class TransitionNode(SensorNode):
    """A pure relay: forwards packets, never produces or stores them."""

    kind: ClassVar[NodeKind] = NodeKind.TRANSITION

    def reset_packets(self) -> None:
        pass


def create_node(
    kind: NodeKind,
    ids: IdAllocator,
    x: float,
    y: float,
    transmission_range: float,
    cost_model: CostModel,
    packet_values: Optional[Sequence[int]] = None,
    capacity: int = 0,
) -> SensorNode:
    """Create a node of ``kind`` with ids drawn from ``ids``.

    ``packet_values`` applies to data nodes and ``capacity`` to storage nodes;
    both are ignored for other kinds.
    """
    kind = NodeKind(kind)
    node_id, uuid = ids.allocate(kind)
    common = dict(
        id=node_id,
        uuid=uuid,
        x=float(x),
        y=float(y),
        transmission_range=float(transmission_range),
        cost_model=cost_model,
    )
    if kind is NodeKind.DATA:
        return DataNode(packet_values=list(packet_values or ()), **common)
    if kind is NodeKind.STORAGE:
        return StorageNode(capacity=capacity, **common)
    return TransitionNode(**common)
