"""Min-cost-flow problem instance produced from a sensor network."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

import networkx as nx


@dataclass(frozen=True)
class FlowArc:
    """One arc of the flow network.

    Attributes:
        tail: Vertex the arc leaves.
        head: Vertex the arc enters.
        upper: Capacity upper bound.
        cost: Cost per unit of flow.
        lower: Capacity lower bound (always 0 for sensor networks).
        comment: Optional human-readable label written above the arc.
    """

    tail: int
    head: int
    upper: int
    cost: int
    lower: int = 0
    comment: Optional[str] = None


@dataclass
class FlowArcGroup:
    """Consecutive arcs written together under an optional title comment."""

    title: Optional[str] = None
    arcs: List[FlowArc] = field(default_factory=list)

    def add(
        self, tail: int, head: int, upper: int, cost: int, comment: Optional[str] = None
    ) -> FlowArc:
        arc = FlowArc(tail=tail, head=head, upper=upper, cost=cost, comment=comment)
        self.arcs.append(arc)
        return arc


@dataclass
class FlowProblem:
    """A single-source single-sink min-cost-flow instance.

    Vertex 0 is the source, ``node_count - 1`` the sink and
    ``node_count - 2`` the dummy vertex that absorbs unassigned packets.

    Attributes:
        node_count: Number of vertices.
        supply: Flow leaving the source; the sink demands the same amount.
        groups: Arc groups in output order.
        labels: Optional vertex labels (vertex -> name) for comments.
    """

    node_count: int
    supply: int
    groups: List[FlowArcGroup] = field(default_factory=list)
    labels: Dict[int, str] = field(default_factory=dict)

    @property
    def source(self) -> int:
        return 0

    @property
    def sink(self) -> int:
        return self.node_count - 1

    @property
    def dummy(self) -> int:
        return self.node_count - 2

    @property
    def supplies(self) -> Dict[int, int]:
        """Signed supply per vertex; only the source and sink are non-zero."""
        return {self.source: self.supply, self.sink: -self.supply}

    @property
    def arcs(self) -> List[FlowArc]:
        return list(self.iter_arcs())

    @property
    def arc_count(self) -> int:
        return sum(len(group.arcs) for group in self.groups)

    def iter_arcs(self) -> Iterator[FlowArc]:
        for group in self.groups:
            yield from group.arcs

    def new_group(self, title: Optional[str] = None) -> FlowArcGroup:
        group = FlowArcGroup(title=title)
        self.groups.append(group)
        return group

    def to_networkx(self) -> nx.DiGraph:
        """Return the instance as a ``networkx.DiGraph``.

        Uses the networkx flow conventions: node attribute ``demand`` is
        negative for supply, edges carry ``capacity`` and ``weight``.

        Raises:
            ValueError: If two arcs share the same tail and head, or an arc
                has a non-zero lower bound.
        """
        graph = nx.DiGraph()
        for vertex in range(self.node_count):
            graph.add_node(vertex, demand=-self.supplies.get(vertex, 0))
        for arc in self.iter_arcs():
            if arc.lower:
                raise ValueError(f"Arc {arc.tail}->{arc.head} has a lower bound")
            if graph.has_edge(arc.tail, arc.head):
                raise ValueError(f"Parallel arc {arc.tail}->{arc.head}")
            graph.add_edge(arc.tail, arc.head, capacity=arc.upper, weight=arc.cost)
        return graph
