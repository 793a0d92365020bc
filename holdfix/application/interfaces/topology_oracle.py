"""Abstract device topology interface."""
from abc import ABC, abstractmethod
from typing import List, Optional

from ...domain.models.device import ClockRegion, NodeKind, ResourceEdge, ResourceNode, Site, SitePin


class TopologyOracle(ABC):
    """Read-only view of the device routing resource graph."""
    
    @abstractmethod
    def node(self, node_id: str) -> ResourceNode:
        """Resolve a node id. Raises KeyError for unknown nodes."""
        pass
    
    def node_length(self, node_id: str) -> int:
        """Intrinsic length of a node."""
        return self.node(node_id).length
    
    def node_kind(self, node_id: str) -> NodeKind:
        """Kind classification of a node."""
        return self.node(node_id).kind
    
    @abstractmethod
    def clock_region_of(self, site: Site) -> ClockRegion:
        """Clock region containing a site."""
        pass
    
    @abstractmethod
    def fabric_entry_for(self, pin: SitePin) -> Optional[ResourceNode]:
        """Node where the pin joins the general fabric, or None for dedicated pins."""
        pass
    
    @abstractmethod
    def requires_alternate_source(self, source: SitePin, sink: SitePin) -> bool:
        """True when source is a dedicated carry output feeding a non-carry sink."""
        pass
    
    @abstractmethod
    def downhill_edges(self, node_id: str) -> List[ResourceEdge]:
        """All device edges leaving a node."""
        pass
    
    @abstractmethod
    def get_or_create_entry(self, node: ResourceNode, exclusive_source: bool = False) -> ResourceNode:
        """Register a fabric entry node; repeated calls return the same node."""
        pass
