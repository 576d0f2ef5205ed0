"""Min-cost-flow problem construction and DIMACS export."""

from sngraph.flow.builders import (
    FlowGranularity,
    build_flow_problem,
    build_node_flow,
    build_packet_flow,
)
from sngraph.flow.dimacs import format_dimacs, write_dimacs
from sngraph.flow.problem import FlowArc, FlowArcGroup, FlowProblem

__all__ = [
    "FlowArc",
    "FlowArcGroup",
    "FlowGranularity",
    "FlowProblem",
    "build_flow_problem",
    "build_node_flow",
    "build_packet_flow",
    "format_dimacs",
    "write_dimacs",
]
