"""Random sensor network generation with rejection sampling.

Candidates are drawn until one is connected. Feasibility depends only on the
node counts, packet count and capacity, so infeasible parameters are rejected
up front instead of being resampled.
"""

from __future__ import annotations

import random
from typing import List, Optional

from sngraph.config import DEFAULT_GENERATION, GenerationConfig
from sngraph.errors import GenerationError
from sngraph.logging import get_logger
from sngraph.model.energy import CostModel, RadioEnergyModel
from sngraph.model.network import SensorNetwork
from sngraph.model.nodes import NodeKind, SensorNode, create_node
from sngraph.utils.ids import IdAllocator

LOGGER = get_logger(__name__)


def _validate(
    width: float,
    length: float,
    node_count: int,
    transmission_range: float,
    data_node_count: int,
    packets_per_node: int,
    storage_node_count: int,
    storage_capacity: int,
    min_value: int,
    max_value: int,
) -> None:
    if width <= 0 or length <= 0:
        raise GenerationError(f"Field must have positive size, got {width} x {length}")
    if node_count < 1:
        raise GenerationError(f"node_count must be positive, got {node_count}")
    if transmission_range < 0:
        raise GenerationError("transmission_range must be non-negative")
    if data_node_count < 0 or storage_node_count < 0:
        raise GenerationError("Node counts must be non-negative")
    if data_node_count + storage_node_count > node_count:
        raise GenerationError(
            f"{data_node_count} data + {storage_node_count} storage nodes "
            f"exceed the {node_count} nodes of the network"
        )
    if packets_per_node < 0 or storage_capacity < 0:
        raise GenerationError("Packet count and storage capacity must be non-negative")
    if min_value > max_value:
        raise GenerationError(f"min_value {min_value} exceeds max_value {max_value}")

    demand = data_node_count * packets_per_node
    capacity = storage_node_count * storage_capacity
    if demand > capacity:
        raise GenerationError(
            f"Infeasible parameters: {demand} overflow packets exceed "
            f"{capacity} packets of storage"
        )


def _sample_nodes(
    rng: random.Random,
    width: float,
    length: float,
    node_count: int,
    transmission_range: float,
    data_node_count: int,
    packets_per_node: int,
    storage_node_count: int,
    storage_capacity: int,
    min_value: int,
    max_value: int,
    cost_model: CostModel,
) -> List[SensorNode]:
    kinds = (
        [NodeKind.DATA] * data_node_count
        + [NodeKind.STORAGE] * storage_node_count
        + [NodeKind.TRANSITION] * (node_count - data_node_count - storage_node_count)
    )
    rng.shuffle(kinds)

    ids = IdAllocator()
    nodes = []
    for kind in kinds:
        x = width * rng.random()
        y = length * rng.random()
        values = None
        if kind is NodeKind.DATA:
            values = [rng.randint(min_value, max_value) for _ in range(packets_per_node)]
        nodes.append(
            create_node(
                kind,
                ids,
                x,
                y,
                transmission_range,
                cost_model,
                packet_values=values,
                capacity=storage_capacity,
            )
        )
    return nodes


def generate_network(
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
    config: Optional[GenerationConfig] = None,
) -> SensorNetwork:
    """Generate a random, connected and feasible sensor network.

    Nodes are placed uniformly in ``[0, width) x [0, length)``. Exactly
    ``data_node_count`` of them are data nodes and ``storage_node_count``
    storage nodes, at random positions in the node sequence; the rest are
    transition nodes. Each overflow packet gets an integer value drawn
    uniformly from ``[min_value, max_value]``.

    Args:
        width: Field width in meters.
        length: Field length in meters.
        node_count: Total number of nodes.
        transmission_range: Transmission range of every node.
        data_node_count: Number of data (producer) nodes.
        packets_per_node: Overflow packets per data node.
        storage_node_count: Number of storage nodes.
        storage_capacity: Capacity of each storage node.
        max_value: Highest packet value (inclusive).
        min_value: Lowest packet value (inclusive).
        cost_model: Energy model for the nodes.
        seed: Seed for reproducible generation.
        config: Attempt budget settings.

    Returns:
        A connected network whose demand fits its storage.

    Raises:
        GenerationError: If the parameters are invalid or infeasible, or no
            connected network was found within the attempt budget.
    """
    _validate(
        width,
        length,
        node_count,
        transmission_range,
        data_node_count,
        packets_per_node,
        storage_node_count,
        storage_capacity,
        min_value,
        max_value,
    )
    if cost_model is None:
        cost_model = RadioEnergyModel()
    config = config or DEFAULT_GENERATION
    rng = random.Random(seed)
    budget = config.attempt_budget(node_count)

    for attempt in range(1, budget + 1):
        nodes = _sample_nodes(
            rng,
            width,
            length,
            node_count,
            transmission_range,
            data_node_count,
            packets_per_node,
            storage_node_count,
            storage_capacity,
            min_value,
            max_value,
            cost_model,
        )
        network = SensorNetwork(
            width=width,
            length=length,
            transmission_range=transmission_range,
            nodes=nodes,
            packets_per_node=packets_per_node,
            storage_capacity=storage_capacity,
            cost_model=cost_model,
        )
        if network.is_connected():
            LOGGER.info(
                "Generated connected network of %d nodes after %d attempt(s)",
                node_count,
                attempt,
            )
            return network
        LOGGER.debug("Attempt %d/%d: network is disconnected, resampling", attempt, budget)

    raise GenerationError(
        f"Failed to create a connected network after {budget} tries; "
        "increase the transmission range or reduce the field size"
    )
