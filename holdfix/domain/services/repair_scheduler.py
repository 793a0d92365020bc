"""Iterative rip-up and reroute of hold-risk connections."""
import heapq
import logging
import time
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple

from ..events.repair_events import (
    ConnectionAbandoned, ConnectionRepaired, DomainEvent, RepairAttempted,
    RepairSessionCompleted, RepairSessionStarted
)
from ..models.connection import Connection, ConnectionKey
from ..models.device import ResourceEdge, SitePin
from ..models.measurement import NetMeasurement
from ..models.netlist import Net
from ..models.report import (
    AbandonedConnection, AbandonReason, RankedConnection, RepairResult, SessionOutcome
)
from .classifier import ViolationClassifier
from .route_tree import sink_branch_edges
from .wirelength import WirelengthPropagator
from ...application.interfaces.event_publisher import EventPublisher
from ...application.interfaces.route_accessor import RouteAccessor
from ...application.interfaces.router_service import RouterService
from ...shared.configuration.settings import RepairSettings
from ...shared.exceptions import ModelCorruptionError
from ...shared.utils.logging_utils import get_context_logger
from ...shared.utils.validation_utils import validate_threshold

logger = logging.getLogger(__name__)


class SchedulerState(Enum):
    """Repair loop states."""
    IDLE = "idle"
    SCANNING = "scanning"
    REPAIRING = "repairing"
    MEASURING = "measuring"
    ABANDONED = "abandoned"
    DONE = "done"


class RepairScheduler:
    """Fixes hold-risk connections shortest first until the frontier clears the threshold.

    Each connection is processed at most once per session. Within one
    connection the avoid set only grows, and the loop stops as soon as it
    stops growing, so a session always terminates.
    """

    def __init__(self, routes: RouteAccessor, router: RouterService,
                 propagator: WirelengthPropagator, classifier: ViolationClassifier,
                 settings: Optional[RepairSettings] = None,
                 event_publisher: Optional[EventPublisher] = None):
        self.routes = routes
        self.router = router
        self.propagator = propagator
        self.classifier = classifier
        self.oracle = propagator.oracle
        self.settings = settings or RepairSettings()
        self.event_publisher = event_publisher
        self.state = SchedulerState.IDLE

        validate_threshold(self.settings.min_wire_length)

    @property
    def threshold(self) -> int:
        return self.settings.min_wire_length

    def run(self) -> RepairResult:
        """Run one repair session over the whole design."""
        result = RepairResult()
        started = time.perf_counter()

        self.state = SchedulerState.SCANNING
        measurement = self.propagator.measure_design()
        result.warnings.extend(measurement.warnings)

        # Lazy-deletion heap: entries whose length no longer matches `current` are stale
        heap: List[Tuple[int, ConnectionKey]] = []
        current: Dict[ConnectionKey, Connection] = {}
        processed: Set[ConnectionKey] = set()
        for connection in self.classifier.hold_candidates(measurement.measured_connections()):
            current[connection.key] = connection
            heap.append((connection.length, connection.key))
        heapq.heapify(heap)

        logger.info(f"Repair session: {len(current)} hold candidates, threshold {self.threshold}")
        self._publish(RepairSessionStarted(candidate_count=len(current), threshold=self.threshold))

        while heap:
            length, key = heapq.heappop(heap)
            connection = current.get(key)
            if connection is None or connection.length != length or key in processed:
                continue
            if length >= self.threshold:
                # Every remaining candidate is at least this long
                break
            if self.settings.max_connections is not None and len(processed) >= self.settings.max_connections:
                result.outcome = SessionOutcome.CONNECTION_LIMIT
                break
            if self.settings.time_budget_s is not None and time.perf_counter() - started > self.settings.time_budget_s:
                result.outcome = SessionOutcome.TIME_BUDGET
                break

            processed.add(key)
            self.repair_connection(connection, result)

            self.state = SchedulerState.SCANNING
            self._refresh_net(connection.net, heap, current, processed, result)

        self.state = SchedulerState.DONE
        logger.info(f"Repair session finished ({result.outcome.value}): {result.repaired_count} repaired, "
                    f"{result.abandoned_count} abandoned, {result.attempts} attempts")
        self._publish(RepairSessionCompleted(result=result))
        return result

    def repair_connection(self, connection: Connection, result: RepairResult) -> bool:
        """Reroute one connection until it meets the threshold or is abandoned.

        Returns True when the connection was repaired.
        """
        net = connection.net
        sink = connection.sink
        log = get_context_logger(__name__, net=net.name, sink=sink.full_name)
        log.info(f"Fix: length {connection.length}, fixed {result.repaired_count} connections so far")

        avoid_nodes: Set[str] = set()
        prior_route: Optional[Set[ResourceEdge]] = None
        length = connection.length
        attempt = 0

        while True:
            self.state = SchedulerState.REPAIRING
            if attempt >= self.settings.max_attempts_per_connection:
                self._abandon(connection, AbandonReason.ATTEMPT_LIMIT, length, result)
                return False
            attempt += 1
            result.attempts += 1

            new_nodes = self.collect_avoid_nodes(
                net, sink, exclude={connection.source_node.id, connection.sink_node.id}
            )
            grew = not new_nodes.issubset(avoid_nodes)
            avoid_nodes |= new_nodes

            removed = self.routes.unroute_pin(net, sink)
            if prior_route is None:
                prior_route = set(removed)

            routed = self.router.route(net, [sink], frozenset(avoid_nodes))
            routed = routed and self.routes.is_sink_routed(net, sink)
            if not routed:
                self._publish(RepairAttempted(net_name=net.name, sink_pin=sink.full_name, attempt=attempt,
                                              avoid_set_size=len(avoid_nodes), routed=False))
                restored = self._restore(net, sink, prior_route)
                log.warning(f"No legal route avoiding {len(avoid_nodes)} nodes"
                            f"{', prior route restored' if restored else ', sink left unrouted'}")
                self._abandon(connection, AbandonReason.ROUTER_FAILED,
                              connection.length if restored else length, result, restored)
                return False

            self.state = SchedulerState.MEASURING
            _, measurement = self.propagator.remeasure(net)
            length = measurement.sink_lengths.get(sink.full_name)
            self._publish(RepairAttempted(net_name=net.name, sink_pin=sink.full_name, attempt=attempt,
                                          avoid_set_size=len(avoid_nodes), routed=True, length=length))
            log.debug(f"Attempt {attempt}: wirelength {length}, avoid set {len(avoid_nodes)}")

            if length is None:
                # Router reported success but the sink is not reachable from the driver
                restored = self._restore(net, sink, prior_route)
                self._abandon(connection, AbandonReason.ROUTER_FAILED,
                              connection.length if restored else None, result, restored)
                return False

            if length >= self.threshold:
                repaired = RankedConnection(net.name, connection.source.full_name, sink.full_name,
                                            length, crosses_clock_region=True)
                result.repaired.append(repaired)
                log.info(f"Repaired after {attempt} attempt(s): wirelength {length}")
                self._publish(ConnectionRepaired(connection=repaired, attempts=attempt))
                return True

            if not grew:
                self._abandon(connection, AbandonReason.AVOID_SET_STALLED, length, result)
                return False

    def collect_avoid_nodes(self, net: Net, sink: SitePin, exclude: Set[str] = frozenset()) -> Set[str]:
        """Fabric nodes on the sink's exclusive branch that are not free detour points."""
        nodes: Set[str] = set()
        for edge in sink_branch_edges(self.routes.committed_edges(net), sink.node_id):
            if edge.end in exclude:
                continue
            try:
                node = self.oracle.node(edge.end)
            except KeyError:
                raise ModelCorruptionError(
                    f"Node {edge.end} committed to net {net.name} is unknown to the device",
                    net_id=net.name, node_id=edge.end
                ) from None
            if node.in_fabric and not node.detour_free:
                nodes.add(node.id)
        return nodes

    def _restore(self, net: Net, sink: SitePin, prior_route: Optional[Set[ResourceEdge]]) -> bool:
        if not self.settings.restore_on_failure or not prior_route:
            return False
        # Drop any partial path the router may have left before putting the old one back
        self.routes.unroute_pin(net, sink)
        self.routes.commit_edges(net, prior_route)
        return True

    def _abandon(self, connection: Connection, reason: AbandonReason, length: Optional[int],
                 result: RepairResult, restored: bool = False) -> None:
        self.state = SchedulerState.ABANDONED
        abandoned = AbandonedConnection(
            net_name=connection.net.name,
            driver_pin=connection.source.full_name,
            sink_pin=connection.sink.full_name,
            reason=reason,
            last_length=length,
            restored=restored
        )
        result.abandoned.append(abandoned)
        logger.warning(f"Abandoned {connection} ({reason.value}), last length {length}")
        self._publish(ConnectionAbandoned(abandoned=abandoned))

    def _refresh_net(self, net: Net, heap: List[Tuple[int, ConnectionKey]],
                     current: Dict[ConnectionKey, Connection], processed: Set[ConnectionKey],
                     result: RepairResult) -> None:
        """Re-derive the hold ranking of one net after its route changed."""
        # Unreached sinks are taken from the settled route, not from intermediate attempts
        wrapper, measurement = self.propagator.remeasure(net)
        self._record_unrouted(measurement, result)
        for key in [k for k in current if k[0] == net.name]:
            del current[key]
        for connection in self.classifier.hold_candidates(wrapper.connections):
            if connection.key in processed:
                continue
            current[connection.key] = connection
            heapq.heappush(heap, (connection.length, connection.key))

    def _record_unrouted(self, measurement: NetMeasurement, result: RepairResult) -> None:
        for sink_name in measurement.unrouted_sinks:
            warning = f"net {measurement.net_name} not fully routed: {sink_name}"
            if warning not in result.warnings:
                result.warnings.append(warning)

    def _publish(self, event: DomainEvent) -> None:
        if self.event_publisher is not None:
            self.event_publisher.publish(event)
