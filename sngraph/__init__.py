"""sngraph: wireless sensor network storage modeling.

sngraph places data (producer), storage and transition (relay) nodes in a
field, connects nodes within transmission range, computes minimum-energy
routing costs between them and reduces the packet-to-storage assignment to
a min-cost-flow instance for an external solver.

Example:
    from sngraph import SensorNetwork

    net = SensorNetwork.generate(
        100, 100, 20, 30, 5, 4, 5, 8, max_value=1000, min_value=100, seed=7
    )
    dn, sn = net.data_nodes[0], net.storage_nodes[0]
    print(net.min_cost_path(dn, sn), net.profit(dn, sn))
    net.export_flow_network("net.inp")
"""

from __future__ import annotations

from sngraph import cli, logging
from sngraph.config import GenerationConfig, RadioConfig, load_config
from sngraph.errors import (
    CapacityError,
    ConfigurationError,
    GenerationError,
    NetworkWriteError,
    NoPathError,
    ParseError,
    SensorNetworkError,
)
from sngraph.flow import FlowArc, FlowGranularity, FlowProblem
from sngraph.model.energy import CostModel, RadioEnergyModel
from sngraph.model.generate import generate_network
from sngraph.model.network import SensorNetwork
from sngraph.model.nodes import (
    DataNode,
    NodeKind,
    SensorNode,
    StorageNode,
    TransitionNode,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Model
    "SensorNetwork",
    "SensorNode",
    "DataNode",
    "StorageNode",
    "TransitionNode",
    "NodeKind",
    "generate_network",
    # Cost model and configuration
    "CostModel",
    "RadioEnergyModel",
    "RadioConfig",
    "GenerationConfig",
    "load_config",
    # Flow export
    "FlowArc",
    "FlowGranularity",
    "FlowProblem",
    # Errors
    "SensorNetworkError",
    "ConfigurationError",
    "ParseError",
    "CapacityError",
    "GenerationError",
    "NoPathError",
    "NetworkWriteError",
    # Utilities
    "cli",
    "logging",
]
