import networkx as nx
import pytest

from sngraph.errors import NoPathError
from sngraph.flow.builders import FlowGranularity, build_flow_problem


def _arcs_by_pair(problem):
    return {(arc.tail, arc.head): arc for arc in problem.iter_arcs()}


class TestPacketFlow:
    def test_counts(self, flow_network):
        problem = build_flow_problem(flow_network)
        packets, storage = 4, 2
        assert problem.node_count == packets + storage + 3
        assert problem.arc_count == packets + packets * storage + packets + storage + 1
        assert problem.supplies == {0: 4, 8: -4}

    def test_vertex_numbering(self, flow_network):
        problem = build_flow_problem(flow_network, FlowGranularity.PACKET)
        arcs = _arcs_by_pair(problem)
        # packet units 1..4, storage 5..6, dummy 7, sink 8
        assert {h for (t, h) in arcs if t == 0} == {1, 2, 3, 4}
        assert problem.labels[1] == "DN01[1]"
        assert problem.labels[4] == "DN02[2]"
        assert problem.labels[5] == "SN01"
        assert problem.labels[6] == "SN02"
        assert (problem.dummy, problem.sink) == (7, 8)
        for unit in range(1, 5):
            assert arcs[(0, unit)].upper == 1
            assert arcs[(unit, 7)].upper == 1
            assert arcs[(unit, 7)].cost == 0
        assert arcs[(5, 8)].upper == 3
        assert arcs[(6, 8)].upper == 2
        assert arcs[(7, 8)].upper == 4

    def test_assignment_costs_are_negated_profits(self, flow_network):
        problem = build_flow_problem(flow_network)
        arcs = _arcs_by_pair(problem)
        dn1 = flow_network.get_data_node_by_id(1)
        sn2 = flow_network.get_storage_node_by_id(2)
        assert arcs[(2, 6)].cost == -flow_network.profit(dn1, sn2, 1)
        assert arcs[(2, 6)].cost == -(20000 - flow_network.min_cost(dn1, sn2))
        assert arcs[(2, 6)].upper == 1

    def test_solver_stores_profitable_packets(self, flow_network):
        problem = build_flow_problem(flow_network)
        flow = nx.min_cost_flow(problem.to_networkx())
        assert sum(flow[0].values()) == 4
        assert flow[problem.dummy][problem.sink] == 0
        assert flow[5][8] + flow[6][8] == 4

    def test_solver_leaves_worthless_packets_unstored(self, build_network):
        net = build_network(
            [("d", 0, 0, [0, 0]), ("s", 30, 0, 2)], transmission_range=30
        )
        problem = build_flow_problem(net)
        flow = nx.min_cost_flow(problem.to_networkx())
        assert flow[problem.dummy][problem.sink] == 2

    def test_unreachable_storage_fails(self, split_network):
        with pytest.raises(NoPathError):
            build_flow_problem(split_network)


class TestNodeFlow:
    def test_counts_and_capacities(self, flow_network):
        problem = build_flow_problem(flow_network, "node")
        p, s = 2, 2
        assert problem.node_count == p + s + 3
        assert problem.arc_count == p + p * s + p + s + 1
        arcs = _arcs_by_pair(problem)
        # data nodes 1..2, storage 3..4, dummy 5, sink 6
        assert arcs[(0, 1)].upper == 2
        assert arcs[(1, 3)].upper == 2
        assert arcs[(1, 5)].upper == 2
        assert arcs[(3, 6)].upper == 3
        assert arcs[(5, 6)].upper == 4

    def test_uses_node_level_value(self, flow_network):
        problem = build_flow_problem(flow_network, FlowGranularity.NODE)
        arcs = _arcs_by_pair(problem)
        dn1 = flow_network.data_nodes[0]
        sn1 = flow_network.storage_nodes[0]
        assert arcs[(1, 3)].cost == -(15000 - flow_network.min_cost(dn1, sn1))

    def test_unknown_granularity(self, flow_network):
        with pytest.raises(ValueError):
            build_flow_problem(flow_network, "bogus")


def test_to_networkx_balanced(flow_network):
    graph = build_flow_problem(flow_network).to_networkx()
    assert sum(d for _, d in graph.nodes(data="demand")) == 0
    assert graph.nodes[0]["demand"] == -4
    assert graph.number_of_edges() == 19
