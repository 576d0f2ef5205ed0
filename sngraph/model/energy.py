"""Energy cost models for packet transmission, reception and storage.

Nodes do not compute energies themselves; each node holds a reference to a
``CostModel`` and delegates to it. The radio formula is therefore swappable
per network without touching the node classes or the path search.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from sngraph.config import DEFAULT_RADIO, RadioConfig

if TYPE_CHECKING:
    from sngraph.model.nodes import SensorNode

MICRO = 1_000_000


class CostModel(Protocol):
    """Per-packet energy costs in non-negative integer units.

    Implementations must be deterministic and independent of call order.
    ``state_dependent`` declares whether costs read mutable node state
    (packet counts, remaining space); the network clears its pairwise cost
    cache on every state change when it is True.
    """

    state_dependent: bool

    def transmission_cost(self, sender: "SensorNode", receiver: "SensorNode") -> int:
        ...

    def receiving_cost(self, node: "SensorNode") -> int:
        ...

    def storage_cost(self, node: "SensorNode") -> int:
        ...


class RadioEnergyModel:
    """First-order radio model reported in micro-joules.

    For a packet of ``k`` bits sent over distance ``d``:

        E_T(d) = k * E_elec + k * eps_amp * d^2
        E_R    = k * E_elec
        E_S    = k * E_store

    Each value is rounded to the nearest integer micro-joule, which keeps the
    costs monotonic in both ``d`` and ``k``.
    """

    state_dependent = False

    def __init__(self, config: RadioConfig = DEFAULT_RADIO) -> None:
        self.config = config

    def __repr__(self) -> str:
        return f"RadioEnergyModel({self.config!r})"

    @property
    def bits_per_packet(self) -> int:
        return self.config.bits_per_packet

    def transmission_energy(self, distance: float) -> int:
        """Energy to send one packet over ``distance`` meters."""
        k = self.config.bits_per_packet
        joules = k * self.config.elec_energy + k * self.config.amp_energy * distance**2
        return _to_micro(joules)

    def transmission_cost(self, sender: "SensorNode", receiver: "SensorNode") -> int:
        return self.transmission_energy(sender.distance_to(receiver))

    def receiving_cost(self, node: "SensorNode") -> int:
        return _to_micro(self.config.bits_per_packet * self.config.elec_energy)

    def storage_cost(self, node: "SensorNode") -> int:
        return _to_micro(self.config.bits_per_packet * self.config.storage_energy)


def _to_micro(joules: float) -> int:
    return int(round(joules * MICRO))
