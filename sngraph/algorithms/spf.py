"""Minimum-cost path search over the sensor topology.

The cost of a hop ``u -> v`` is ``u.calculate_transmission_cost(v) +
v.calculate_receiving_cost()``. Because the receiving term belongs to the
head of the hop, path costs are direction dependent in general.

The search is Dijkstra without decrease-key: a node may sit in the queue
several times with different tentative costs. The first time it is popped
it is settled (predecessor recorded, neighbors relaxed); later pops of the
same node are skipped. With a destination, the search stops as soon as the
destination is popped.
"""

from __future__ import annotations

from heapq import heappop, heappush
from itertools import count
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Set, Tuple

from sngraph.errors import NoPathError
from sngraph.model.nodes import SensorNode

Cost = int
EdgeCostFunc = Callable[[SensorNode, SensorNode], Cost]


def hop_cost(src: SensorNode, dst: SensorNode) -> Cost:
    """Cost of moving one packet over the direct link ``src -> dst``."""
    return src.calculate_transmission_cost(dst) + dst.calculate_receiving_cost()


def spf(
    graph: Mapping[SensorNode, Set[SensorNode]],
    src_node: SensorNode,
    dst_node: Optional[SensorNode] = None,
    edge_cost_func: EdgeCostFunc = hop_cost,
) -> Tuple[Dict[SensorNode, Cost], Dict[SensorNode, Optional[SensorNode]]]:
    """Shortest path first from ``src_node``.

    Args:
        graph: Adjacency mapping.
        src_node: Start of the search.
        dst_node: Optional destination; the search ends once it is settled.
        edge_cost_func: Non-negative cost of a single hop.

    Returns:
        costs: settled nodes mapped to their minimal cost from ``src_node``.
        pred: settled nodes mapped to their predecessor (``None`` for the source).
    """
    if src_node not in graph:
        raise NoPathError(src_node, dst_node)

    costs: Dict[SensorNode, Cost] = {}
    pred: Dict[SensorNode, Optional[SensorNode]] = {}

    # Sequence numbers break cost ties; nodes themselves are not orderable
    seq = count()
    min_pq: List[Tuple[Cost, int, SensorNode, Optional[SensorNode]]] = []
    heappush(min_pq, (0, next(seq), src_node, None))

    while min_pq:
        src_to_node_cost, _, node, prev = heappop(min_pq)
        if node in pred:
            continue

        costs[node] = src_to_node_cost
        pred[node] = prev
        if node is dst_node:
            break

        for neighbor in graph.get(node, ()):
            if neighbor not in pred:
                heappush(
                    min_pq,
                    (
                        src_to_node_cost + edge_cost_func(node, neighbor),
                        next(seq),
                        neighbor,
                        node,
                    ),
                )

    return costs, pred


def resolve_path(
    pred: Mapping[SensorNode, Optional[SensorNode]],
    src_node: SensorNode,
    dst_node: SensorNode,
) -> List[SensorNode]:
    """Walk predecessors from ``dst_node`` back to ``src_node``.

    Raises:
        NoPathError: If ``dst_node`` was never settled, or the chain does not
            lead back to ``src_node``.
    """
    if dst_node not in pred:
        raise NoPathError(src_node, dst_node)

    path = [dst_node]
    curr = dst_node
    while curr is not src_node:
        curr = pred.get(curr)
        if curr is None:
            raise NoPathError(src_node, dst_node)
        path.append(curr)
    path.reverse()
    return path


def min_cost_path(
    graph: Mapping[SensorNode, Set[SensorNode]],
    src_node: SensorNode,
    dst_node: SensorNode,
    edge_cost_func: EdgeCostFunc = hop_cost,
) -> List[SensorNode]:
    """Return the nodes of a minimum-cost path from ``src_node`` to ``dst_node``.

    A path from a node to itself is ``[node]``. Ties between equal-cost paths
    are broken arbitrarily.

    Raises:
        NoPathError: If ``dst_node`` is not reachable from ``src_node``.
    """
    if src_node is dst_node:
        if src_node not in graph:
            raise NoPathError(src_node, dst_node)
        return [src_node]
    _, pred = spf(graph, src_node, dst_node, edge_cost_func)
    return resolve_path(pred, src_node, dst_node)


def path_cost(path: Sequence[SensorNode], edge_cost_func: EdgeCostFunc = hop_cost) -> Cost:
    """Sum of hop costs along ``path``; zero for paths with fewer than two nodes."""
    return sum(edge_cost_func(u, v) for u, v in zip(path, path[1:]))
