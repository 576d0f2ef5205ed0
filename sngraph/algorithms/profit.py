"""Storage feasibility and per-packet profit."""

from __future__ import annotations

from typing import Iterable, Optional

from sngraph.model.nodes import DataNode, StorageNode


def total_demand(data_nodes: Iterable[DataNode]) -> int:
    """Total overflow packets across producers."""
    return sum(dn.overflow_packets for dn in data_nodes)


def total_capacity(storage_nodes: Iterable[StorageNode]) -> int:
    """Total packet capacity across storage nodes."""
    return sum(sn.capacity for sn in storage_nodes)


def is_feasible(
    data_nodes: Iterable[DataNode], storage_nodes: Iterable[StorageNode]
) -> bool:
    """True if every overflow packet fits into the storage nodes."""
    return total_demand(data_nodes) <= total_capacity(storage_nodes)


def packet_value(data_node: DataNode, packet_index: Optional[int] = None) -> int:
    """Value of one packet of ``data_node``.

    With ``packet_index=None`` the node-level value is used (the shared value
    for uniformly valued nodes).

    Raises:
        IndexError: If ``packet_index`` is outside the node's packets.
    """
    if packet_index is None:
        return data_node.overflow_packet_value
    if not 0 <= packet_index < data_node.overflow_packets:
        raise IndexError(
            f"{data_node.name} has no packet {packet_index} "
            f"({data_node.overflow_packets} packets)"
        )
    return data_node.packet_values[packet_index]


def calculate_profit(value: int, cost: int) -> int:
    """Profit of storing a packet worth ``value`` at routing cost ``cost``.

    Negative results are legal: the packet is not worth storing there.
    """
    return value - cost
