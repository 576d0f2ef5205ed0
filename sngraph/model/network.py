"""The sensor network facade.

``SensorNetwork`` owns the nodes of one construction (random generation or
file load), the proximity graph built over them and the pairwise cost cache,
and exposes the query, mutation and export operations on top of them.
"""

from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import (
    TYPE_CHECKING,
    Dict,
    FrozenSet,
    List,
    Mapping,
    Optional,
    Sequence,
    Set,
    Tuple,
    TypeVar,
    Union,
)

import networkx as nx

from sngraph.algorithms.cache import PathCostCache
from sngraph.algorithms.profit import (
    calculate_profit,
    is_feasible,
    packet_value,
    total_capacity,
    total_demand,
)
from sngraph.algorithms.spf import min_cost_path, path_cost
from sngraph.errors import CapacityError
from sngraph.flow.builders import FlowGranularity, build_flow_problem
from sngraph.flow.dimacs import write_dimacs
from sngraph.flow.problem import FlowProblem
from sngraph.graph.topology import build_adjacency, is_connected, to_networkx
from sngraph.io import SnDocument, read_sn, write_sn
from sngraph.logging import get_logger
from sngraph.model.energy import CostModel, RadioEnergyModel
from sngraph.model.nodes import (
    DataNode,
    NodeKind,
    SensorNode,
    StorageNode,
    TransitionNode,
    create_node,
)
from sngraph.utils.ids import IdAllocator

if TYPE_CHECKING:
    from sngraph.config import GenerationConfig

LOGGER = get_logger(__name__)

N = TypeVar("N", bound=SensorNode)


class SensorNetwork:
    """A sensor field of data, storage and transition nodes.

    Args:
        width: Field width in meters.
        length: Field length in meters.
        transmission_range: Common transmission range of the nodes.
        nodes: Nodes in construction order.
        packets_per_node: Overflow packets per data node (file header value).
        storage_capacity: Capacity per storage node (file header value).
        cost_model: Energy model shared by the nodes; defaults to the
            model of the first node, or a default ``RadioEnergyModel``.

    The min-cost cache is keyed by node identity only. It is cleared on node
    state changes when any node's cost model declares ``state_dependent``.
    """

    def __init__(
        self,
        width: float,
        length: float,
        transmission_range: float,
        nodes: Sequence[SensorNode],
        packets_per_node: int,
        storage_capacity: int,
        cost_model: Optional[CostModel] = None,
    ) -> None:
        self._width = width
        self._length = length
        self._transmission_range = transmission_range
        self._packets_per_node = packets_per_node
        self._storage_capacity = storage_capacity

        self._nodes: Tuple[SensorNode, ...] = tuple(nodes)
        self._data_nodes = self._of_type(DataNode)
        self._storage_nodes = self._of_type(StorageNode)
        self._transition_nodes = self._of_type(TransitionNode)

        if cost_model is None:
            cost_model = self._nodes[0].cost_model if self._nodes else RadioEnergyModel()
        self.cost_model = cost_model
        self._state_dependent = any(
            getattr(node.cost_model, "state_dependent", False) for node in self._nodes
        )

        self._by_uuid: Dict[int, SensorNode] = {n.uuid: n for n in self._nodes}
        self._by_name: Dict[str, SensorNode] = {n.name: n for n in self._nodes}
        self._graph = build_adjacency(self._nodes)
        self._cost_cache = PathCostCache()

    def _of_type(self, cls: type) -> Tuple:
        return tuple(node for node in self._nodes if isinstance(node, cls))

    #
    # Construction
    #
    @classmethod
    def from_document(
        cls, document: SnDocument, cost_model: Optional[CostModel] = None
    ) -> SensorNetwork:
        """Build a network from a parsed ``.sn`` document."""
        if cost_model is None:
            cost_model = RadioEnergyModel()
        ids = IdAllocator()
        nodes = [
            create_node(
                record.kind,
                ids,
                record.x,
                record.y,
                document.transmission_range,
                cost_model,
                packet_values=record.packet_values(document.packets_per_node),
                capacity=document.storage_capacity,
            )
            for record in document.nodes
        ]
        return cls(
            width=document.width,
            length=document.length,
            transmission_range=document.transmission_range,
            nodes=nodes,
            packets_per_node=document.packets_per_node,
            storage_capacity=document.storage_capacity,
            cost_model=cost_model,
        )

    @classmethod
    def from_file(
        cls,
        path: Union[str, Path],
        overflow_packets: Optional[int] = None,
        storage_capacity: Optional[int] = None,
        cost_model: Optional[CostModel] = None,
    ) -> SensorNetwork:
        """Load a network from an ``.sn`` file.

        Args:
            path: File to read.
            overflow_packets: If given, replaces the packets per data node.
            storage_capacity: If given, replaces the capacity per storage node.
            cost_model: Energy model for the loaded nodes.

        Raises:
            ConfigurationError: If the file is missing or malformed.
            ParseError: If a node type or number cannot be interpreted.
        """
        network = cls.from_document(read_sn(path), cost_model=cost_model)
        if overflow_packets is not None:
            network.set_overflow_packets(overflow_packets)
        if storage_capacity is not None:
            network.set_storage_capacity(storage_capacity)
        LOGGER.info(
            "Loaded sensor network from '%s': %d nodes (%d data, %d storage, %d transition)",
            path,
            network.sensor_node_count,
            network.data_node_count,
            network.storage_node_count,
            network.transition_node_count,
        )
        return network

    @classmethod
    def generate(
        cls,
        width: float,
        length: float,
        node_count: int,
        transmission_range: float,
        data_node_count: int,
        packets_per_node: int,
        storage_node_count: int,
        storage_capacity: int,
        *,
        max_value: int,
        min_value: int = 1,
        cost_model: Optional[CostModel] = None,
        seed: Optional[int] = None,
        config: Optional["GenerationConfig"] = None,
    ) -> SensorNetwork:
        """Generate a random connected, feasible network.

        See ``sngraph.model.generate.generate_network``.
        """
        from sngraph.model.generate import generate_network

        return generate_network(
            width,
            length,
            node_count,
            transmission_range,
            data_node_count,
            packets_per_node,
            storage_node_count,
            storage_capacity,
            max_value=max_value,
            min_value=min_value,
            cost_model=cost_model,
            seed=seed,
            config=config,
        )

    #
    # Accessors
    #
    @property
    def width(self) -> float:
        return self._width

    @property
    def length(self) -> float:
        return self._length

    @property
    def transmission_range(self) -> float:
        return self._transmission_range

    @property
    def packets_per_node(self) -> int:
        return self._packets_per_node

    @property
    def storage_capacity(self) -> int:
        return self._storage_capacity

    @property
    def nodes(self) -> Tuple[SensorNode, ...]:
        return self._nodes

    @property
    def data_nodes(self) -> Tuple[DataNode, ...]:
        return self._data_nodes

    @property
    def storage_nodes(self) -> Tuple[StorageNode, ...]:
        return self._storage_nodes

    @property
    def transition_nodes(self) -> Tuple[TransitionNode, ...]:
        return self._transition_nodes

    @property
    def sensor_node_count(self) -> int:
        return len(self._nodes)

    @property
    def data_node_count(self) -> int:
        return len(self._data_nodes)

    @property
    def storage_node_count(self) -> int:
        return len(self._storage_nodes)

    @property
    def transition_node_count(self) -> int:
        return len(self._transition_nodes)

    @property
    def adjacency(self) -> Mapping[SensorNode, FrozenSet[SensorNode]]:
        """Read-only view of the proximity graph."""
        return MappingProxyType({n: frozenset(nbrs) for n, nbrs in self._graph.items()})

    @property
    def cost_cache(self) -> PathCostCache:
        return self._cost_cache

    def neighbors(self, node: SensorNode) -> Set[SensorNode]:
        """Nodes within range of ``node`` (a copy)."""
        return set(self._graph.get(node, ()))

    def get_node_by_uuid(self, uuid: int) -> SensorNode:
        try:
            return self._by_uuid[uuid]
        except KeyError:
            raise KeyError(f"No node with uuid {uuid}") from None

    def get_node_by_name(self, name: str) -> SensorNode:
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(f"No node named '{name}'") from None

    def get_data_node_by_id(self, node_id: int) -> DataNode:
        return self._by_id(self._data_nodes, node_id, NodeKind.DATA)

    def get_storage_node_by_id(self, node_id: int) -> StorageNode:
        return self._by_id(self._storage_nodes, node_id, NodeKind.STORAGE)

    def get_transition_node_by_id(self, node_id: int) -> TransitionNode:
        return self._by_id(self._transition_nodes, node_id, NodeKind.TRANSITION)

    @staticmethod
    def _by_id(nodes: Sequence[N], node_id: int, kind: NodeKind) -> N:
        for node in nodes:
            if node.id == node_id:
                return node
        raise KeyError(f"No {kind.prefix} node with id {node_id}")

    def to_networkx(self) -> nx.Graph:
        """The proximity graph as a ``networkx.Graph`` keyed by node name."""
        return to_networkx(self._graph)

    #
    # Queries
    #
    def is_connected(self) -> bool:
        """True if all nodes are directly or indirectly connected."""
        return is_connected(self._graph)

    def is_feasible(self) -> bool:
        """True if storage capacity covers all overflow packets."""
        return is_feasible(self._data_nodes, self._storage_nodes)

    def total_demand(self) -> int:
        return total_demand(self._data_nodes)

    def total_capacity(self) -> int:
        return total_capacity(self._storage_nodes)

    def min_cost_path(self, src: SensorNode, dst: SensorNode) -> List[SensorNode]:
        """Nodes along a minimum-cost path from ``src`` to ``dst``.

        Raises:
            NoPathError: If ``dst`` is unreachable from ``src``.
        """
        return min_cost_path(self._graph, src, dst)

    def path_cost(self, path: Sequence[SensorNode]) -> int:
        """Sum of hop costs along ``path``."""
        return path_cost(path)

    def min_cost(self, src: SensorNode, dst: SensorNode) -> int:
        """Cost of the minimum-cost path from ``src`` to ``dst`` (cached).

        Raises:
            NoPathError: If ``dst`` is unreachable from ``src``.
        """
        cost = self._cost_cache.get(src, dst)
        if cost is None:
            cost = path_cost(min_cost_path(self._graph, src, dst))
            self._cost_cache.put(src, dst, cost)
            LOGGER.debug("Min cost %s -> %s = %d", src.name, dst.name, cost)
        return cost

    def profit(
        self, data_node: DataNode, storage_node: StorageNode, packet_index: Optional[int] = None
    ) -> int:
        """Packet value minus the min cost of routing it to ``storage_node``.

        Args:
            data_node: Producer of the packet.
            storage_node: Candidate storage node.
            packet_index: Packet of ``data_node``; None uses the node-level value.
        """
        value = packet_value(data_node, packet_index)
        return calculate_profit(value, self.min_cost(data_node, storage_node))

    #
    # Mutations
    #
    def set_overflow_packets(self, overflow_packets: int) -> None:
        """Set the overflow packet count of every data node and refill them."""
        if overflow_packets < 0:
            raise ValueError("overflow packets must be non-negative")
        self._packets_per_node = overflow_packets
        for dn in self._data_nodes:
            dn.set_overflow_packets(overflow_packets)
        self._state_changed()

    def set_storage_capacity(self, storage_capacity: int) -> None:
        """Set the capacity of every storage node and empty them."""
        if storage_capacity < 0:
            raise ValueError("storage capacity must be non-negative")
        self._storage_capacity = storage_capacity
        for sn in self._storage_nodes:
            sn.set_capacity(storage_capacity)
        self._state_changed()

    def can_send_packets(self, dn: DataNode, sn: StorageNode, packets: int) -> bool:
        return dn.can_remove_packets(packets) and sn.can_store(packets)

    def send_packets(self, dn: DataNode, sn: StorageNode, packets: int) -> None:
        """Move ``packets`` packets from ``dn`` into ``sn``; all or nothing.

        Raises:
            CapacityError: If ``dn`` holds fewer packets or ``sn`` has less
                space than requested. Neither node is changed.
        """
        if packets < 0:
            raise ValueError("cannot send a negative packet count")
        if not self.can_send_packets(dn, sn, packets):
            raise CapacityError(
                f"Cannot send {packets} packets from {dn.name} "
                f"({dn.packets_left}/{dn.overflow_packets} packets left) -> {sn.name} "
                f"({sn.space_left}/{sn.capacity} space left)",
                requested=packets,
                packets_left=dn.packets_left,
                space_left=sn.space_left,
            )
        dn.remove_packets(packets)
        sn.store_packets(packets)
        self._state_changed()

    def reset_packets(self) -> None:
        """Refill all data nodes and empty all storage nodes."""
        for node in self._nodes:
            node.reset_packets()
        self._state_changed()

    def _state_changed(self) -> None:
        if self._state_dependent and len(self._cost_cache):
            LOGGER.debug("Node state changed; clearing %d cached costs", len(self._cost_cache))
            self._cost_cache.clear()

    #
    # Export
    #
    def save(self, path: Union[str, Path]) -> None:
        """Save the network as an ``.sn`` file.

        Raises:
            NetworkWriteError: If the file cannot be written.
        """
        write_sn(self, path)

    def flow_problem(
        self, granularity: Union[FlowGranularity, str] = FlowGranularity.PACKET
    ) -> FlowProblem:
        """Build the min-cost-flow instance for packet assignment."""
        return build_flow_problem(self, granularity)

    def export_flow_network(
        self,
        path: Union[str, Path],
        granularity: Union[FlowGranularity, str] = FlowGranularity.PACKET,
    ) -> FlowProblem:
        """Write the min-cost-flow instance in DIMACS format and return it.

        Raises:
            NoPathError: If a storage node is unreachable from a data node.
            NetworkWriteError: If the file cannot be written.
        """
        problem = self.flow_problem(granularity)
        write_dimacs(problem, path)
        return problem

    def __repr__(self) -> str:
        return (
            f"SensorNetwork(width={self._width}, length={self._length}, "
            f"nodes={len(self._nodes)}, data={len(self._data_nodes)}, "
            f"storage={len(self._storage_nodes)}, transition={len(self._transition_nodes)})"
        )
