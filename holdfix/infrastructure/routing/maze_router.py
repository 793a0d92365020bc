"""Reference point-to-point router over the in-memory resource graph."""
import heapq
import itertools
import logging
from typing import AbstractSet, Dict, List, Optional, Sequence, Set

from ...application.interfaces.router_service import RouterService
from ...domain.models.device import ResourceEdge, SitePin
from ...domain.models.netlist import Net
from ..device.memory_topology import MemoryTopology
from ..persistence.memory_route_store import MemoryRouteStore

logger = logging.getLogger(__name__)


class MazeRouter(RouterService):
    """Dijkstra search from a net's existing tree to one sink.
    
    Nodes occupied by other nets and nodes in the avoid set are unusable.
    Entering a node costs its length, with a minimum of one, so the router
    prefers short detours the way a delay-driven router does.
    """
    
    def __init__(self, topology: MemoryTopology, routes: MemoryRouteStore, max_expansions: int = 200000):
        self.topology = topology
        self.routes = routes
        self.max_expansions = max_expansions
    
    def route(self, net: Net, sinks: Sequence[SitePin], avoid_nodes: AbstractSet[str]) -> bool:
        success = True
        for sink in sinks:
            path = self.find_path(net, sink, avoid_nodes)
            if path is None:
                logger.debug(f"No path to {sink} of net {net.name} avoiding {len(avoid_nodes)} nodes")
                success = False
                continue
            self.routes.commit_edges(net, path)
            logger.debug(f"Routed {sink} of net {net.name} with {len(path)} edges")
        return success
    
    def find_path(self, net: Net, sink: SitePin, avoid_nodes: AbstractSet[str]) -> Optional[List[ResourceEdge]]:
        target = sink.node_id
        tree = self.routes.reachable_nodes(net)
        if target in tree:
            return []
        blocked: Set[str] = self.routes.used_nodes(exclude_net=net) | set(avoid_nodes)
        
        counter = itertools.count()
        open_set = []
        g_score: Dict[str, float] = {}
        came_from: Dict[str, ResourceEdge] = {}
        for node_id in sorted(tree):
            g_score[node_id] = 0.0
            heapq.heappush(open_set, (0.0, next(counter), node_id))
        
        closed: Set[str] = set()
        expansions = 0
        while open_set and expansions < self.max_expansions:
            cost, _, node_id = heapq.heappop(open_set)
            if node_id in closed:
                continue
            if node_id == target:
                return self._reconstruct(came_from, target, tree)
            closed.add(node_id)
            expansions += 1
            
            for edge in self.topology.downhill_edges(node_id):
                neighbor = edge.end
                if neighbor in closed or neighbor in blocked or neighbor in tree:
                    continue
                tentative = cost + max(self.topology.node_length(neighbor), 1)
                if tentative < g_score.get(neighbor, float('inf')):
                    g_score[neighbor] = tentative
                    came_from[neighbor] = edge
                    heapq.heappush(open_set, (tentative, next(counter), neighbor))
        
        if expansions >= self.max_expansions:
            logger.warning(f"Search for {sink} of net {net.name} hit {self.max_expansions} expansions")
        return None
    
    @staticmethod
    def _reconstruct(came_from: Dict[str, ResourceEdge], target: str, tree: Set[str]) -> List[ResourceEdge]:
        path = []
        node_id = target
        while node_id not in tree:
            edge = came_from[node_id]
            path.append(edge)
            node_id = edge.start
        path.reverse()
        return path
