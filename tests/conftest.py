"""Shared fixtures: small hand-placed networks and test cost models."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

import pytest

from sngraph.logging import set_global_log_level
from sngraph.model.energy import RadioEnergyModel
from sngraph.model.network import SensorNetwork
from sngraph.model.nodes import NodeKind, SensorNode, StorageNode, create_node
from sngraph.utils.ids import IdAllocator

# (kind, x, y, payload): payload is packet values for "d", capacity for "s"
NodeSpec = Tuple[str, float, float, object]


class FlatCostModel:
    """Every hop costs ``transmit`` to send plus a per-kind receive cost.

    Storage nodes receive at ``storage_receive``; everything else at
    ``receive``. Makes hop costs direction dependent.
    """

    state_dependent = False

    def __init__(self, transmit: int = 10, receive: int = 1, storage_receive: int = 5):
        self.transmit = transmit
        self.receive = receive
        self.storage_receive = storage_receive

    def transmission_cost(self, sender, receiver) -> int:
        return self.transmit

    def receiving_cost(self, node) -> int:
        if node.kind is NodeKind.STORAGE:
            return self.storage_receive
        return self.receive

    def storage_cost(self, node) -> int:
        return 0


class FillCostModel(FlatCostModel):
    """Receiving at a storage node gets dearer as it fills up."""

    state_dependent = True

    def receiving_cost(self, node) -> int:
        if isinstance(node, StorageNode):
            return self.storage_receive + (node.capacity - node.space_left)
        return self.receive


def make_network(
    specs: Sequence[NodeSpec],
    transmission_range: float,
    cost_model=None,
    packets_per_node: Optional[int] = None,
    storage_capacity: Optional[int] = None,
    width: float = 100.0,
    length: float = 100.0,
) -> SensorNetwork:
    """Build a network from explicit node placements."""
    cost_model = cost_model if cost_model is not None else RadioEnergyModel()
    ids = IdAllocator()
    nodes: List[SensorNode] = []
    for kind, x, y, payload in specs:
        if kind == "d":
            node = create_node(
                NodeKind.DATA, ids, x, y, transmission_range, cost_model, packet_values=payload
            )
        elif kind == "s":
            node = create_node(
                NodeKind.STORAGE, ids, x, y, transmission_range, cost_model, capacity=payload
            )
        else:
            node = create_node(NodeKind.TRANSITION, ids, x, y, transmission_range, cost_model)
        nodes.append(node)

    if packets_per_node is None:
        packets_per_node = next((len(p) for k, _, _, p in specs if k == "d"), 0)
    if storage_capacity is None:
        storage_capacity = next((p for k, _, _, p in specs if k == "s"), 0)
    return SensorNetwork(
        width=width,
        length=length,
        transmission_range=transmission_range,
        nodes=nodes,
        packets_per_node=packets_per_node,
        storage_capacity=storage_capacity,
        cost_model=cost_model,
    )


@pytest.fixture
def two_node_network() -> SensorNetwork:
    # DN01 ---30m--- SN01
    return make_network([("d", 0, 0, [1800]), ("s", 30, 0, 1)], transmission_range=30)


@pytest.fixture
def chain_network() -> SensorNetwork:
    # DN01 --20m-- TN01 --20m-- SN01; the ends are 40m apart, out of range
    return make_network(
        [("d", 0, 0, [500, 600]), ("t", 20, 0, None), ("s", 40, 0, 2)],
        transmission_range=25,
    )


@pytest.fixture
def split_network() -> SensorNetwork:
    # Two islands: {DN01, SN01} and {SN02}
    return make_network(
        [("d", 0, 0, [100]), ("s", 10, 0, 1), ("s", 90, 90, 1)],
        transmission_range=15,
    )


@pytest.fixture
def flow_network() -> SensorNetwork:
    # Two producers with two packets each, two storage nodes, one relay.
    # All nodes are pairwise within range.
    return make_network(
        [
            ("d", 0, 0, [10000, 20000]),
            ("s", 10, 0, 3),
            ("t", 5, 5, None),
            ("d", 0, 10, [5000, 5000]),
            ("s", 10, 10, 2),
        ],
        transmission_range=50,
    )


@pytest.fixture
def flat_cost_model() -> FlatCostModel:
    return FlatCostModel()


@pytest.fixture
def fill_cost_model() -> FillCostModel:
    return FillCostModel()


SAMPLE_SN = """\
100.000000 50.000000 30.000000
2 3
4
d 0.000000 0.000000 700
s 20.000000 0.000000
t 20.000000 20.000000
d 40.000000 0.000000 100 200
"""


@pytest.fixture
def sample_sn_file(tmp_path):
    path = tmp_path / "sample.sn"
    path.write_text(SAMPLE_SN)
    return path


@pytest.fixture
def build_network():
    """Factory fixture: ``build_network(specs, transmission_range, ...)``."""
    return make_network


@pytest.fixture(autouse=True)
def _restore_log_level():
    # CLI runs change the package log level globally
    yield
    set_global_log_level(logging.INFO)
