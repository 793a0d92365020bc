"""Tests for the in-memory topology, route store, event bus and reference router."""
import pytest

from holdfix.domain.events.repair_events import DomainEvent, RepairAttempted, RepairSessionStarted
from holdfix.domain.models.device import NodeKind, ResourceEdge
from holdfix.domain.services.route_tree import sink_branch_edges
from holdfix.infrastructure.device.memory_topology import MemoryTopology
from holdfix.infrastructure.persistence.event_bus import EventBus
from holdfix.infrastructure.routing.maze_router import MazeRouter
from holdfix.shared.exceptions import ValidationError

from design_factory import IMUX_S1, IMUX_S2, LONG_A, OUT, QUAD_A, QUAD_B, S1_PIN, S2_PIN, SRC


class TestMemoryTopology:
    """Device graph construction and oracle answers."""

    def test_default_lengths_from_kind(self):
        topology = MemoryTopology()
        assert topology.add_node("q", NodeKind.QUAD).length == 4
        assert topology.add_node("l", NodeKind.LONG).length == 12
        assert topology.add_node("p", NodeKind.PINFEED).length == 0
        assert topology.add_node("s", NodeKind.SINGLE, 3).length == 3

    def test_negative_length_rejected(self):
        with pytest.raises(ValidationError):
            MemoryTopology().add_node("bad", NodeKind.SINGLE, -1)

    def test_edge_to_unknown_node(self):
        topology = MemoryTopology()
        topology.add_node("a", NodeKind.SINGLE)
        with pytest.raises(KeyError):
            topology.add_edge("a", "b")

    def test_node_queries(self, hold_design):
        assert hold_design.topology.node_length(LONG_A) == 12
        assert hold_design.topology.node_kind(QUAD_A) == NodeKind.QUAD

    def test_unknown_node_lookup(self, hold_design):
        with pytest.raises(KeyError):
            hold_design.topology.node("INT_X9Y9/GHOST")

    def test_fabric_entries(self, hold_design, carry_design):
        assert hold_design.topology.fabric_entry_for(hold_design.s2).id == IMUX_S2
        assert carry_design.topology.fabric_entry_for(carry_design.cin) is None

    def test_alternate_source_rule(self, carry_design):
        topology = carry_design.topology
        assert not topology.requires_alternate_source(carry_design.cout, carry_design.cin)
        assert topology.requires_alternate_source(carry_design.cout, carry_design.a1)
        assert not topology.requires_alternate_source(carry_design.dmux, carry_design.a1)

    def test_get_or_create_entry_is_idempotent(self, hold_design):
        topology = hold_design.topology
        node = topology.node(IMUX_S2)
        assert topology.get_or_create_entry(node) is topology.get_or_create_entry(node)


class TestRouteStore:
    """Committed routes and single-sink unrouting."""

    def test_unroute_removes_only_sink_branch(self, hold_design):
        routes = hold_design.routes
        removed = routes.unroute_pin(hold_design.net, hold_design.s2)

        assert removed == {
            ResourceEdge(IMUX_S2, S2_PIN), ResourceEdge(QUAD_A, IMUX_S2), ResourceEdge(OUT, QUAD_A)
        }
        assert not routes.is_sink_routed(hold_design.net, hold_design.s2)
        assert routes.is_sink_routed(hold_design.net, hold_design.s1)
        assert ResourceEdge(SRC, OUT) in routes.committed_edges(hold_design.net)

    def test_unroute_single_sink_net_clears_to_driver(self, hold_design):
        removed = hold_design.routes.unroute_pin(hold_design.local, hold_design.local.sinks[0])

        assert len(removed) == 4
        assert hold_design.routes.committed_edges(hold_design.local) == set()

    def test_unrouted_sink_has_nothing_to_remove(self, hold_design):
        hold_design.routes.unroute_pin(hold_design.net, hold_design.s2)
        assert hold_design.routes.unroute_pin(hold_design.net, hold_design.s2) == set()

    def test_branch_stops_at_shared_node(self, hold_design):
        branch = sink_branch_edges(hold_design.routes.committed_edges(hold_design.net), S1_PIN)

        assert branch == [
            ResourceEdge(IMUX_S1, S1_PIN),
            ResourceEdge(QUAD_B, IMUX_S1),
            ResourceEdge(LONG_A, QUAD_B),
            ResourceEdge(OUT, LONG_A),
        ]

    def test_branch_of_pass_through_sink_is_empty(self):
        edges = {ResourceEdge("a", "b"), ResourceEdge("b", "c")}
        assert sink_branch_edges(edges, "b") == []

    def test_duplicate_net_rejected(self, hold_design):
        with pytest.raises(ValueError):
            hold_design.routes.add_net(hold_design.net)

    def test_used_nodes_excludes_own_net(self, hold_design):
        used = hold_design.routes.used_nodes(exclude_net=hold_design.net)
        assert "INT_X0Y0/EE1" in used
        assert QUAD_A not in used


class TestMazeRouter:
    """Reference router behaviour."""

    def test_prefers_cheapest_detour(self, hold_design):
        routes = hold_design.routes
        routes.unroute_pin(hold_design.net, hold_design.s2)
        router = MazeRouter(hold_design.topology, routes)

        path = router.find_path(hold_design.net, hold_design.s2, frozenset())

        # Double costs 2 against the quad's 4
        assert path == [
            ResourceEdge(OUT, "INT_X2Y0/EE2_A"),
            ResourceEdge("INT_X2Y0/EE2_A", IMUX_S2),
            ResourceEdge(IMUX_S2, S2_PIN),
        ]

    def test_avoid_nodes_are_not_used(self, hold_design):
        routes = hold_design.routes
        routes.unroute_pin(hold_design.net, hold_design.s2)
        router = MazeRouter(hold_design.topology, routes)

        assert router.route(hold_design.net, [hold_design.s2], frozenset({QUAD_A, "INT_X2Y0/EE2_A"}))

        used = {edge.end for edge in routes.committed_edges(hold_design.net)}
        assert "INT_X3Y0/LONG_B" in used
        assert QUAD_A not in used
        assert routes.is_sink_routed(hold_design.net, hold_design.s2)

    def test_no_path_commits_nothing(self, hold_design):
        routes = hold_design.routes
        routes.unroute_pin(hold_design.net, hold_design.s2)
        before = routes.committed_edges(hold_design.net)
        router = MazeRouter(hold_design.topology, routes)

        avoid = frozenset({QUAD_A, "INT_X2Y0/EE2_A", "INT_X3Y0/LONG_B"})
        assert not router.route(hold_design.net, [hold_design.s2], avoid)
        assert routes.committed_edges(hold_design.net) == before

    def test_routed_sink_needs_no_path(self, hold_design):
        router = MazeRouter(hold_design.topology, hold_design.routes)
        assert router.find_path(hold_design.net, hold_design.s2, frozenset()) == []

    def test_expansion_limit(self, hold_design):
        hold_design.routes.unroute_pin(hold_design.net, hold_design.s2)
        router = MazeRouter(hold_design.topology, hold_design.routes, max_expansions=1)

        assert router.find_path(hold_design.net, hold_design.s2, frozenset()) is None


class TestEventBus:
    """In-memory event publication."""

    def test_subscribers_receive_events(self, event_bus):
        received = []
        event_bus.subscribe(RepairAttempted, received.append)

        event_bus.publish(RepairAttempted(net_name="n", attempt=1))
        event_bus.publish(RepairSessionStarted(candidate_count=3))

        assert [e.net_name for e in received] == ["n"]
        assert len(event_bus.get_event_history()) == 2

    def test_base_class_subscribers_see_everything(self, event_bus):
        received = []
        event_bus.subscribe(DomainEvent, received.append)

        event_bus.publish(RepairAttempted())
        event_bus.publish(RepairSessionStarted())

        assert len(received) == 2

    def test_failing_handler_does_not_stop_publication(self, event_bus):
        received = []

        def broken(event):
            raise RuntimeError("observer failed")

        event_bus.subscribe(RepairAttempted, broken)
        event_bus.subscribe(RepairAttempted, received.append)
        event_bus.publish(RepairAttempted())

        assert len(received) == 1

    def test_unsubscribe_and_statistics(self, event_bus):
        received = []
        event_bus.subscribe(RepairAttempted, received.append)
        event_bus.unsubscribe(RepairAttempted, received.append)
        event_bus.publish(RepairAttempted())

        assert received == []
        stats = event_bus.get_statistics()
        assert stats['total_events_published'] == 1
        assert stats['event_types'] == {'RepairAttempted': 1}

    def test_history_is_bounded(self):
        bus = EventBus(max_history=3)
        for attempt in range(5):
            bus.publish(RepairAttempted(attempt=attempt))

        assert [e.attempt for e in bus.get_event_history()] == [2, 3, 4]
