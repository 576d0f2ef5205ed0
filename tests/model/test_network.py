import logging

import pytest

from sngraph.errors import CapacityError, NoPathError
from sngraph.model.network import SensorNetwork
from sngraph.model.nodes import DataNode, StorageNode, TransitionNode


class TestConstruction:
    def test_counts_and_classification(self, flow_network):
        assert flow_network.sensor_node_count == 5
        assert flow_network.data_node_count == 2
        assert flow_network.storage_node_count == 2
        assert flow_network.transition_node_count == 1
        assert all(isinstance(n, DataNode) for n in flow_network.data_nodes)
        assert all(isinstance(n, StorageNode) for n in flow_network.storage_nodes)
        assert all(isinstance(n, TransitionNode) for n in flow_network.transition_nodes)

    def test_names_and_uuids(self, flow_network):
        assert [n.name for n in flow_network.nodes] == ["DN01", "SN01", "TN01", "DN02", "SN02"]
        assert [n.uuid for n in flow_network.nodes] == [1, 2, 3, 4, 5]

    def test_from_file(self, sample_sn_file, caplog):
        with caplog.at_level(logging.INFO, logger="sngraph"):
            net = SensorNetwork.from_file(sample_sn_file)
        assert net.width == 100.0 and net.length == 50.0
        assert net.transmission_range == 30.0
        assert net.packets_per_node == 2 and net.storage_capacity == 3
        assert net.data_nodes[0].packet_values == [700, 700]
        assert net.data_nodes[1].packet_values == [100, 200]
        assert net.is_connected()
        assert not net.is_feasible()
        assert any("Loaded sensor network" in r.message for r in caplog.records)

    def test_from_file_overrides(self, sample_sn_file):
        net = SensorNetwork.from_file(sample_sn_file, overflow_packets=3, storage_capacity=6)
        assert net.packets_per_node == 3
        assert net.data_nodes[0].packet_values == [700, 700, 700]
        assert net.data_nodes[1].packet_values == [100, 200, 200]
        assert net.storage_nodes[0].capacity == 6
        assert net.is_feasible()

    def test_repr(self, flow_network):
        assert "nodes=5" in repr(flow_network)


class TestLookups:
    def test_by_uuid_and_name(self, flow_network):
        tn = flow_network.get_node_by_uuid(3)
        assert tn.name == "TN01"
        assert flow_network.get_node_by_name("SN02").uuid == 5

    def test_by_kind_id(self, flow_network):
        assert flow_network.get_data_node_by_id(2).name == "DN02"
        assert flow_network.get_storage_node_by_id(1).name == "SN01"
        assert flow_network.get_transition_node_by_id(1).name == "TN01"

    def test_missing_lookups(self, flow_network):
        with pytest.raises(KeyError):
            flow_network.get_node_by_uuid(99)
        with pytest.raises(KeyError):
            flow_network.get_node_by_name("DN09")
        with pytest.raises(KeyError):
            flow_network.get_storage_node_by_id(3)

    def test_neighbors_is_a_copy(self, chain_network):
        dn = chain_network.data_nodes[0]
        nbrs = chain_network.neighbors(dn)
        nbrs.clear()
        assert [n.name for n in chain_network.neighbors(dn)] == ["TN01"]

    def test_adjacency_is_read_only(self, chain_network):
        with pytest.raises(TypeError):
            chain_network.adjacency[chain_network.nodes[0]] = frozenset()


class TestSendPackets:
    def test_send_moves_packets(self, flow_network):
        dn = flow_network.data_nodes[0]
        sn = flow_network.storage_nodes[0]
        assert flow_network.can_send_packets(dn, sn, 2)
        flow_network.send_packets(dn, sn, 2)
        assert dn.packets_left == 0
        assert sn.space_left == 1
        assert dn.is_empty()

    def test_send_over_capacity_changes_nothing(self, flow_network):
        dn = flow_network.data_nodes[0]
        sn = flow_network.storage_nodes[1]  # capacity 2
        flow_network.send_packets(dn, sn, 1)
        other = flow_network.data_nodes[1]
        assert not flow_network.can_send_packets(other, sn, 2)
        with pytest.raises(CapacityError) as exc_info:
            flow_network.send_packets(other, sn, 2)
        assert exc_info.value.requested == 2
        assert exc_info.value.details == {"packets_left": 2, "space_left": 1}
        assert other.packets_left == 2
        assert sn.space_left == 1

    def test_send_more_than_held(self, flow_network):
        dn = flow_network.data_nodes[0]
        sn = flow_network.storage_nodes[0]
        with pytest.raises(CapacityError):
            flow_network.send_packets(dn, sn, 3)
        assert dn.packets_left == 2 and sn.space_left == 3

    def test_negative_send(self, flow_network):
        with pytest.raises(ValueError):
            flow_network.send_packets(
                flow_network.data_nodes[0], flow_network.storage_nodes[0], -1
            )

    def test_reset_packets(self, flow_network):
        dn = flow_network.data_nodes[0]
        sn = flow_network.storage_nodes[0]
        flow_network.send_packets(dn, sn, 2)
        flow_network.reset_packets()
        assert dn.packets_left == 2
        assert sn.space_left == sn.capacity == 3


class TestMutations:
    def test_set_storage_capacity_empties_nodes(self, flow_network):
        dn = flow_network.data_nodes[0]
        sn = flow_network.storage_nodes[0]
        flow_network.send_packets(dn, sn, 1)
        flow_network.set_storage_capacity(4)
        assert flow_network.storage_capacity == 4
        assert all(s.space_left == 4 for s in flow_network.storage_nodes)
        assert flow_network.total_capacity() == 8

    def test_set_overflow_packets_extends_with_last_value(self, flow_network):
        flow_network.set_overflow_packets(3)
        assert flow_network.packets_per_node == 3
        assert flow_network.data_nodes[0].packet_values == [10000, 20000, 20000]
        assert flow_network.total_demand() == 6

    def test_set_overflow_packets_truncates(self, flow_network):
        flow_network.set_overflow_packets(1)
        assert flow_network.data_nodes[0].packet_values == [10000]
        assert flow_network.data_nodes[0].packets_left == 1

    def test_negative_values_rejected(self, flow_network):
        with pytest.raises(ValueError):
            flow_network.set_overflow_packets(-1)
        with pytest.raises(ValueError):
            flow_network.set_storage_capacity(-1)


class TestQueries:
    def test_min_cost_path_through_relay(self, chain_network):
        dn, tn, sn = chain_network.nodes
        assert chain_network.min_cost_path(dn, sn) == [dn, tn, sn]
        assert chain_network.min_cost(dn, sn) == chain_network.path_cost([dn, tn, sn])

    def test_disconnected_network(self, split_network):
        assert not split_network.is_connected()
        dn = split_network.data_nodes[0]
        with pytest.raises(NoPathError):
            split_network.min_cost(dn, split_network.storage_nodes[1])
        assert split_network.min_cost(dn, split_network.storage_nodes[0]) > 0

    def test_to_networkx_keyed_by_name(self, chain_network):
        graph = chain_network.to_networkx()
        assert set(graph.nodes) == {"DN01", "TN01", "SN01"}
        assert graph.number_of_edges() == 2

    def test_flow_problem_default_granularity(self, flow_network):
        assert flow_network.flow_problem().node_count == 9
        assert flow_network.flow_problem("node").node_count == 7
