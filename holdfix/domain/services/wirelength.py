"""Wirelength propagation over committed routes."""
import logging
from collections import deque
from typing import Deque, Iterable, List, Optional, Tuple

from ..models.connection import NetWrapper
from ..models.device import ResourceNode
from ..models.measurement import DesignMeasurement, MeasurementContext, NetMeasurement, WirelengthMap
from ..models.netlist import Net, NetType
from .net_builder import NetWrapperBuilder
from .route_tree import index_by_start
from ...application.interfaces.route_accessor import RouteAccessor
from ...application.interfaces.topology_oracle import TopologyOracle
from ...shared.configuration.settings import WirelengthSettings
from ...shared.exceptions import ModelCorruptionError

logger = logging.getLogger(__name__)


class WirelengthPropagator:
    """Accumulates driver-to-node length along the edges a net actually uses.

    Lengths are assigned by a breadth-first walk from the driver's fabric
    entry, so a node is only ever assigned after its upstream node. Routes
    are trees: the first assignment of a node is final.
    """

    def __init__(self, oracle: TopologyOracle, routes: RouteAccessor,
                 settings: Optional[WirelengthSettings] = None,
                 builder: Optional[NetWrapperBuilder] = None):
        self.oracle = oracle
        self.routes = routes
        self.settings = settings or WirelengthSettings()
        self.builder = builder or NetWrapperBuilder(oracle, routes)

    def node_contribution(self, node: ResourceNode) -> int:
        """Weighted length a node adds when the route enters it."""
        if not node.in_fabric:
            return 0
        wirelength = node.length * self.settings.length_weight
        if wirelength == 0:
            wirelength = self.settings.zero_length_floor
        return wirelength

    def propagate(self, wrapper: NetWrapper) -> WirelengthMap:
        """Build the WirelengthMap of one net from its committed edges."""
        net = wrapper.net
        downhill = index_by_start(self.routes.committed_edges(net))
        wirelength_map = WirelengthMap()
        queue: Deque[str] = deque()

        for root in self._roots(wrapper):
            if root not in wirelength_map:
                wirelength_map.assign(root, 0)
                queue.append(root)

        while queue:
            node_id = queue.popleft()
            upstream = wirelength_map[node_id]
            for edge in downhill.get(node_id, ()):
                if edge.end in wirelength_map:
                    continue
                end_node = self._resolve(net, edge.end)
                wirelength_map.assign(edge.end, upstream + self.node_contribution(end_node))
                queue.append(edge.end)

        return wirelength_map

    def measure_net(self, wrapper: NetWrapper,
                    context: Optional[MeasurementContext] = None) -> NetMeasurement:
        """Set each connection's length from a fresh WirelengthMap.

        Sinks the route does not reach keep ``length = None`` and are
        reported as not fully routed.
        """
        net = wrapper.net
        if context is not None:
            self._record_usage(net, context)

        wirelength_map = self.propagate(wrapper)
        measurement = NetMeasurement(net.name, wirelength_map)

        for connection in wrapper.connections:
            if connection.direct:
                continue
            length = wirelength_map.get(connection.sink_node.id)
            connection.length = length
            if length is None:
                logger.warning(f"Net {net.name} not fully routed: sink {connection.sink} unreached")
                measurement.unrouted_sinks.append(connection.sink.full_name)
            else:
                measurement.sink_lengths[connection.sink.full_name] = length

        return measurement

    def remeasure(self, net: Net) -> Tuple[NetWrapper, NetMeasurement]:
        """Rebuild and measure one net after its route changed."""
        wrapper = self.builder.build(net)
        return wrapper, self.measure_net(wrapper)

    def should_measure(self, net: Net) -> bool:
        """Signal nets with a source and sinks, excluding clock nets."""
        if net.net_type != NetType.WIRE or not net.is_routable:
            return False
        source_name = net.source.full_name
        return not any(pattern in source_name for pattern in self.settings.skip_source_patterns)

    def measure_design(self, nets: Optional[Iterable[Net]] = None) -> DesignMeasurement:
        """Measure every eligible net; the per-kind accumulator is merged across nets."""
        result = DesignMeasurement()
        for net in (self.routes.nets() if nets is None else nets):
            if not self.should_measure(net):
                continue
            wrapper = self.builder.build(net)
            net_context = MeasurementContext()
            measurement = self.measure_net(wrapper, net_context)
            result.context.merge(net_context)
            result.wrappers.append(wrapper)
            result.measurements[net.name] = measurement
            for sink_name in measurement.unrouted_sinks:
                result.warnings.append(f"net {net.name} not fully routed: {sink_name}")

        logger.info(f"Measured {result.nets_measured} nets, {result.context.used_nodes} nodes, "
                    f"wirelength {result.context.total_wirelength}")
        return result

    def _roots(self, wrapper: NetWrapper) -> List[str]:
        roots: List[str] = []
        for connection in wrapper.routable_connections:
            root = connection.source_node.id
            if root not in roots:
                roots.append(root)
        return roots

    def _resolve(self, net: Net, node_id: str) -> ResourceNode:
        try:
            return self.oracle.node(node_id)
        except KeyError:
            raise ModelCorruptionError(
                f"Node {node_id} committed to net {net.name} is unknown to the device",
                net_id=net.name, node_id=node_id
            ) from None

    def _record_usage(self, net: Net, context: MeasurementContext) -> None:
        node_ids = set()
        for edge in self.routes.committed_edges(net):
            node_ids.add(edge.start)
            node_ids.add(edge.end)
        for node_id in sorted(node_ids):
            node = self._resolve(net, node_id)
            if not node.in_fabric:
                continue
            context.record(node.kind, node.length)
