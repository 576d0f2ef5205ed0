"""Reduction of packet-to-storage assignment into min-cost flow.

Two granularities are available:

``FlowGranularity.PACKET`` (default)
    One vertex per overflow packet. Every packet has its own value, so every
    packet-to-storage arc carries that packet's profit.

``FlowGranularity.NODE``
    One vertex per data node, carrying all of its packets at the node-level
    packet value.

In both, the source feeds each producer vertex, each producer vertex feeds
every storage vertex (cost = -profit, since the solver minimizes) and the
dummy vertex (cost 0, packet left unstored), and storage vertices plus the
dummy drain into the sink.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, List, Tuple, Union

from sngraph.algorithms.profit import total_demand
from sngraph.flow.problem import FlowProblem
from sngraph.logging import get_logger
from sngraph.model.nodes import DataNode, StorageNode

if TYPE_CHECKING:
    from sngraph.model.network import SensorNetwork

LOGGER = get_logger(__name__)


class FlowGranularity(str, Enum):
    """How producer packets are represented in the flow network."""

    PACKET = "packet"
    NODE = "node"


def _ordered(network: "SensorNetwork") -> Tuple[List[DataNode], List[StorageNode]]:
    data_nodes = sorted(network.data_nodes, key=lambda n: n.id)
    storage_nodes = sorted(network.storage_nodes, key=lambda n: n.id)
    return data_nodes, storage_nodes


def _add_sink_arcs(
    problem: FlowProblem, storage_vertex: Dict[StorageNode, int]
) -> None:
    group = problem.new_group("SNs to Sink")
    for sn, vertex in storage_vertex.items():
        group.add(vertex, problem.sink, sn.capacity, 0)
    group = problem.new_group("Dummy to Sink")
    group.add(problem.dummy, problem.sink, problem.supply, 0)


def build_packet_flow(network: "SensorNetwork") -> FlowProblem:
    """Per-packet construction.

    Vertices: 0 source; packet units by data node id then packet index;
    storage nodes by id; dummy; sink. Arc count is
    ``P + P*S + P + S + 1`` for ``P`` packets and ``S`` storage nodes.
    """
    data_nodes, storage_nodes = _ordered(network)
    units = [(dn, index) for dn in data_nodes for index in range(dn.overflow_packets)]
    supply = len(units)
    problem = FlowProblem(node_count=supply + len(storage_nodes) + 3, supply=supply)

    unit_vertex = {unit: vertex for vertex, unit in enumerate(units, start=1)}
    storage_vertex = {
        sn: vertex for vertex, sn in enumerate(storage_nodes, start=supply + 1)
    }
    for (dn, index), vertex in unit_vertex.items():
        problem.labels[vertex] = f"{dn.name}[{index + 1}]"
    for sn, vertex in storage_vertex.items():
        problem.labels[vertex] = sn.name

    group = problem.new_group()
    for vertex in unit_vertex.values():
        group.add(problem.source, vertex, 1, 0, comment=f"Source -> {problem.labels[vertex]}")

    for (dn, index), vertex in unit_vertex.items():
        label = problem.labels[vertex]
        group = problem.new_group()
        for sn, sn_vertex in storage_vertex.items():
            profit = network.profit(dn, sn, index)
            group.add(vertex, sn_vertex, 1, -profit, comment=f"{label} -> {sn.name}")
        group.add(vertex, problem.dummy, 1, 0, comment=f"{label} to Dummy Node")

    _add_sink_arcs(problem, storage_vertex)
    return problem


def build_node_flow(network: "SensorNetwork") -> FlowProblem:
    """Aggregate construction with one vertex per data node.

    Vertices: 0 source; data nodes by id; storage nodes by id; dummy; sink.
    Arc count is ``p + p*s + p + s + 1`` for ``p`` data nodes and ``s``
    storage nodes.
    """
    data_nodes, storage_nodes = _ordered(network)
    supply = total_demand(data_nodes)
    problem = FlowProblem(
        node_count=len(data_nodes) + len(storage_nodes) + 3, supply=supply
    )

    dn_vertex = {dn: vertex for vertex, dn in enumerate(data_nodes, start=1)}
    storage_vertex = {
        sn: vertex for vertex, sn in enumerate(storage_nodes, start=len(data_nodes) + 1)
    }
    for node, vertex in {**dn_vertex, **storage_vertex}.items():
        problem.labels[vertex] = node.name

    group = problem.new_group()
    for dn, vertex in dn_vertex.items():
        group.add(problem.source, vertex, dn.overflow_packets, 0, comment=f"Source -> {dn.name}")

    for dn, vertex in dn_vertex.items():
        group = problem.new_group()
        for sn, sn_vertex in storage_vertex.items():
            profit = network.profit(dn, sn)
            group.add(
                vertex, sn_vertex, dn.overflow_packets, -profit, comment=f"{dn.name} -> {sn.name}"
            )
        group.add(
            vertex, problem.dummy, dn.overflow_packets, 0, comment=f"{dn.name} to Dummy Node"
        )

    _add_sink_arcs(problem, storage_vertex)
    return problem


_BUILDERS: Dict[FlowGranularity, Callable[["SensorNetwork"], FlowProblem]] = {
    FlowGranularity.PACKET: build_packet_flow,
    FlowGranularity.NODE: build_node_flow,
}


def build_flow_problem(
    network: "SensorNetwork",
    granularity: Union[FlowGranularity, str] = FlowGranularity.PACKET,
) -> FlowProblem:
    """Build the min-cost-flow instance for ``network``.

    Raises:
        ValueError: If ``granularity`` is not a known granularity.
        NoPathError: If a storage node is unreachable from a data node.
    """
    granularity = FlowGranularity(granularity)
    problem = _BUILDERS[granularity](network)
    LOGGER.debug(
        "Built %s-level flow problem: %d vertices, %d arcs, supply %d",
        granularity.value,
        problem.node_count,
        problem.arc_count,
        problem.supply,
    )
    return problem
