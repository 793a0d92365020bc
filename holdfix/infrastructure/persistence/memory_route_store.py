"""In-memory committed route store."""
import logging
from collections import defaultdict, deque
from typing import Dict, Iterable, List, Optional, Set

from ...application.interfaces.route_accessor import RouteAccessor
from ...domain.models.device import ResourceEdge, SitePin
from ...domain.models.netlist import Net
from ...domain.services.route_tree import index_by_start, sink_branch_edges

logger = logging.getLogger(__name__)


class MemoryRouteStore(RouteAccessor):
    """In-memory implementation of the net and route accessor."""

    def __init__(self):
        self._nets: Dict[str, Net] = {}
        self._routes: Dict[str, Set[ResourceEdge]] = defaultdict(set)

    def add_net(self, net: Net, edges: Iterable[ResourceEdge] = ()) -> Net:
        if net.name in self._nets:
            raise ValueError(f"Duplicate net {net.name}")
        self._nets[net.name] = net
        self._routes[net.name] = set(edges)
        return net

    def nets(self) -> List[Net]:
        return list(self._nets.values())

    def get_net(self, name: str) -> Optional[Net]:
        return self._nets.get(name)

    def committed_edges(self, net: Net) -> Set[ResourceEdge]:
        return set(self._routes[net.name])

    def commit_edges(self, net: Net, edges: Iterable[ResourceEdge]) -> None:
        self._routes[net.name].update(edges)

    def unroute_pin(self, net: Net, sink: SitePin) -> Set[ResourceEdge]:
        route = self._routes[net.name]
        removed = set(sink_branch_edges(route, sink.node_id))
        route.difference_update(removed)
        logger.debug(f"Unrouted {sink} of net {net.name}: removed {len(removed)} edges")
        return removed

    def is_sink_routed(self, net: Net, sink: SitePin) -> bool:
        if net.source is None:
            return False
        return sink.node_id in self.reachable_nodes(net)

    def reachable_nodes(self, net: Net) -> Set[str]:
        """Nodes reached from the net's driver pins through committed edges."""
        downhill = index_by_start(self._routes[net.name])
        roots = [pin.node_id for pin in (net.source, net.alternate_source) if pin is not None]
        seen = set(roots)
        queue = deque(roots)
        while queue:
            node_id = queue.popleft()
            for edge in downhill.get(node_id, ()):
                if edge.end not in seen:
                    seen.add(edge.end)
                    queue.append(edge.end)
        return seen

    def used_nodes(self, exclude_net: Optional[Net] = None) -> Set[str]:
        """Nodes occupied by any net's committed route."""
        occupied = set()
        for name, edges in self._routes.items():
            if exclude_net is not None and name == exclude_net.name:
                continue
            for edge in edges:
                occupied.add(edge.start)
                occupied.add(edge.end)
        return occupied
