"""In-memory device topology."""
import logging
from collections import defaultdict
from typing import Dict, List, Optional, Set

from ...application.interfaces.topology_oracle import TopologyOracle
from ...domain.models.device import (
    ClockRegion, NODE_KIND_TABLE, NodeKind, ResourceEdge, ResourceNode, Site, SitePin
)
from ...shared.utils.validation_utils import validate_node_length

logger = logging.getLogger(__name__)


class MemoryTopology(TopologyOracle):
    """Dictionary-backed routing resource graph."""
    
    def __init__(self):
        self.nodes: Dict[str, ResourceNode] = {}
        self.sites: Dict[str, Site] = {}
        self._downhill: Dict[str, List[ResourceEdge]] = defaultdict(list)
        self._edges: Set[ResourceEdge] = set()
        self._fabric_entries: Dict[SitePin, str] = {}
        self._carry_inputs: Dict[SitePin, SitePin] = {}   # carry out -> carry in it feeds
        self._registered: Dict[str, ResourceNode] = {}
        self._exclusive_sources: Set[str] = set()
    
    def add_node(self, node_id: str, kind: NodeKind, length: Optional[int] = None) -> ResourceNode:
        """Add node; length defaults to the kind's table length."""
        if length is None:
            length = NODE_KIND_TABLE[kind].default_length
        validate_node_length(node_id, length)
        node = ResourceNode(node_id, kind, length)
        self.nodes[node_id] = node
        return node
    
    def add_edge(self, start: str, end: str) -> ResourceEdge:
        for node_id in (start, end):
            if node_id not in self.nodes:
                raise KeyError(f"Edge endpoint {node_id} is not a known node")
        edge = ResourceEdge(start, end)
        if edge not in self._edges:
            self._edges.add(edge)
            self._downhill[start].append(edge)
        return edge
    
    def add_site(self, name: str, column: int, row: int = 0) -> Site:
        site = Site(name, ClockRegion(column, row))
        self.sites[name] = site
        return site
    
    def add_pin(self, site: Site, name: str, node_id: str, is_output: bool = False,
                fabric_entry: Optional[str] = None, dedicated: bool = False) -> SitePin:
        """Create a site pin attached to ``node_id``.
        
        ``fabric_entry`` names the node where the pin joins the fabric; None
        marks a pin that only has dedicated wiring.
        """
        if node_id not in self.nodes:
            raise KeyError(f"Pin node {node_id} is not a known node")
        pin = SitePin(site, name, is_output=is_output, node_id=node_id, dedicated=dedicated)
        if fabric_entry is not None:
            if fabric_entry not in self.nodes:
                raise KeyError(f"Fabric entry {fabric_entry} is not a known node")
            self._fabric_entries[pin] = fabric_entry
        return pin
    
    def link_carry(self, carry_out: SitePin, carry_in: SitePin) -> None:
        """Record the dedicated carry input a carry output drives."""
        self._carry_inputs[carry_out] = carry_in
    
    @property
    def edges(self) -> Set[ResourceEdge]:
        return set(self._edges)
    
    def fabric_entry_id(self, pin: SitePin) -> Optional[str]:
        return self._fabric_entries.get(pin)
    
    def carry_links(self) -> Dict[SitePin, SitePin]:
        return dict(self._carry_inputs)
    
    # TopologyOracle
    
    def node(self, node_id: str) -> ResourceNode:
        return self.nodes[node_id]
    
    def clock_region_of(self, site: Site) -> ClockRegion:
        return self.sites[site.name].clock_region if site.name in self.sites else site.clock_region
    
    def fabric_entry_for(self, pin: SitePin) -> Optional[ResourceNode]:
        node_id = self._fabric_entries.get(pin)
        return self.nodes[node_id] if node_id is not None else None
    
    def requires_alternate_source(self, source: SitePin, sink: SitePin) -> bool:
        if not source.dedicated or not source.is_output:
            return False
        return self._carry_inputs.get(source) != sink
    
    def downhill_edges(self, node_id: str) -> List[ResourceEdge]:
        return list(self._downhill.get(node_id, ()))
    
    def get_or_create_entry(self, node: ResourceNode, exclusive_source: bool = False) -> ResourceNode:
        registered = self._registered.get(node.id)
        if registered is None:
            registered = self.nodes.get(node.id, node)
            self._registered[node.id] = registered
        if exclusive_source:
            self._exclusive_sources.add(node.id)
        return registered
    
    def is_registered(self, node_id: str) -> bool:
        return node_id in self._registered
    
    def is_exclusive_source(self, node_id: str) -> bool:
        return node_id in self._exclusive_sources
