"""Proximity graph construction and connectivity checks.

The topology is an undirected adjacency mapping ``node -> set(neighbors)``
where two nodes are neighbors when they are within transmission range.
"""

from __future__ import annotations

from typing import Dict, Mapping, Sequence, Set

import networkx as nx

from sngraph.logging import get_logger
from sngraph.model.nodes import SensorNode

LOGGER = get_logger(__name__)

Adjacency = Dict[SensorNode, Set[SensorNode]]


def build_adjacency(nodes: Sequence[SensorNode]) -> Adjacency:
    """Build the proximity graph over ``nodes``.

    Every unordered pair ``(i, j)`` with ``i < j`` is tested once with
    ``nodes[i].in_range_of(nodes[j])``; on success both directions are
    inserted, so the result is symmetric. Isolated nodes still appear as keys
    with an empty neighbor set.

    Args:
        nodes: Nodes in construction order.

    Returns:
        Adjacency mapping, with keys in the order of ``nodes``.
    """
    graph: Adjacency = {node: set() for node in nodes}
    edge_count = 0
    for i, node1 in enumerate(nodes):
        for node2 in nodes[i + 1 :]:
            if node1.in_range_of(node2):
                graph[node1].add(node2)
                graph[node2].add(node1)
                edge_count += 1
    LOGGER.debug("Built topology with %d nodes and %d links", len(nodes), edge_count)
    return graph


def is_connected(graph: Mapping[SensorNode, Set[SensorNode]]) -> bool:
    """Return True if every node is reachable from the first node.

    Iterative depth-first search with an explicit stack. An empty graph is
    considered connected.
    """
    if not graph:
        return True
    start = next(iter(graph))
    stack = [start]
    seen: Set[SensorNode] = set()
    while stack:
        curr = stack.pop()
        if curr in seen:
            continue
        seen.add(curr)
        for neighbor in graph.get(curr, ()):
            if neighbor not in seen:
                stack.append(neighbor)
    return len(seen) == len(graph)


def is_symmetric(graph: Mapping[SensorNode, Set[SensorNode]]) -> bool:
    """True if ``a in graph[b]`` exactly when ``b in graph[a]``."""
    return all(
        node in graph.get(neighbor, ()) for node, nbrs in graph.items() for neighbor in nbrs
    )


def to_networkx(graph: Mapping[SensorNode, Set[SensorNode]]) -> nx.Graph:
    """Convert an adjacency mapping into a ``networkx.Graph``.

    Vertices are node names. Node attributes: ``kind`` (type token), ``uuid``,
    ``pos`` as ``(x, y)``. Edges carry the Euclidean length of the link as
    both ``distance`` and ``weight``.
    """
    out = nx.Graph()
    for node in graph:
        out.add_node(node.name, kind=node.kind.value, uuid=node.uuid, pos=node.position)
    for node, nbrs in graph.items():
        for neighbor in nbrs:
            if not out.has_edge(node.name, neighbor.name):
                length = node.distance_to(neighbor)
                out.add_edge(node.name, neighbor.name, distance=length, weight=length)
    return out
