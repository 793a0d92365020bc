"""Abstract net and committed route interface."""
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Set

from ...domain.models.device import ResourceEdge, SitePin
from ...domain.models.netlist import Net


class RouteAccessor(ABC):
    """Access to nets and the edges currently committed to their routes."""
    
    @abstractmethod
    def nets(self) -> List[Net]:
        """All nets of the design."""
        pass
    
    @abstractmethod
    def get_net(self, name: str) -> Optional[Net]:
        """Get net by name."""
        pass
    
    @abstractmethod
    def committed_edges(self, net: Net) -> Set[ResourceEdge]:
        """Edges currently assigned to a net."""
        pass
    
    @abstractmethod
    def commit_edges(self, net: Net, edges: Iterable[ResourceEdge]) -> None:
        """Add edges to a net's committed route."""
        pass
    
    @abstractmethod
    def unroute_pin(self, net: Net, sink: SitePin) -> Set[ResourceEdge]:
        """Remove only the path serving one sink. Returns the removed edges."""
        pass
    
    @abstractmethod
    def is_sink_routed(self, net: Net, sink: SitePin) -> bool:
        """Check whether a sink is reached by the committed route."""
        pass
    
    def source_pin(self, net: Net) -> Optional[SitePin]:
        return net.source
    
    def alternate_source_pin(self, net: Net) -> Optional[SitePin]:
        return net.alternate_source
    
    def sink_pins(self, net: Net) -> List[SitePin]:
        return list(net.sinks)
