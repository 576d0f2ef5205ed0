"""Topology graph construction and conversion."""

from sngraph.graph.topology import (
    Adjacency,
    build_adjacency,
    is_connected,
    is_symmetric,
    to_networkx,
)

__all__ = ["Adjacency", "build_adjacency", "is_connected", "is_symmetric", "to_networkx"]
