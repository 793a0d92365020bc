"""Helpers over the committed edge set of one net."""
from collections import defaultdict
from typing import Dict, Iterable, List, Set

from ..models.device import ResourceEdge


def index_by_start(edges: Iterable[ResourceEdge]) -> Dict[str, List[ResourceEdge]]:
    """Downhill adjacency of a committed route."""
    downhill: Dict[str, List[ResourceEdge]] = defaultdict(list)
    for edge in edges:
        downhill[edge.start].append(edge)
    # Deterministic walk order regardless of set iteration order
    for node_edges in downhill.values():
        node_edges.sort(key=lambda e: e.end)
    return downhill


def sink_branch_edges(edges: Iterable[ResourceEdge], sink_node_id: str) -> List[ResourceEdge]:
    """Edges that serve only the given sink.
    
    Walks uphill from the sink's node until the route branches toward
    another load or the driver is reached. The returned list is ordered
    from the sink toward the driver.
    """
    edge_set: Set[ResourceEdge] = set(edges)
    uphill: Dict[str, List[ResourceEdge]] = defaultdict(list)
    fanout: Dict[str, int] = defaultdict(int)
    for edge in edge_set:
        uphill[edge.end].append(edge)
        fanout[edge.start] += 1
    
    if fanout[sink_node_id] > 0:
        # The sink wire also feeds other loads
        return []

    branch: List[ResourceEdge] = []
    visited = {sink_node_id}
    node_id = sink_node_id
    while uphill.get(node_id):
        # A tree has one driver per node; take a stable choice if not
        edge = min(uphill[node_id], key=lambda e: e.start)
        branch.append(edge)
        node_id = edge.start
        if node_id in visited or fanout[node_id] > 1:
            break
        visited.add(node_id)
    return branch
