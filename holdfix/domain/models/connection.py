"""Point-to-point connections of a routed net."""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .device import ResourceNode, SitePin
from .netlist import Net


ConnectionKey = Tuple[str, str]


@dataclass(eq=False)
class Connection:
    """One driver to sink pair within a net.
    
    ``length`` stays None for direct connections and for sinks that were
    not reached by the committed route.
    """
    id: int
    source: SitePin
    sink: SitePin
    net_wrapper: 'NetWrapper'
    direct: bool = False
    source_node: Optional[ResourceNode] = None
    sink_node: Optional[ResourceNode] = None
    length: Optional[int] = None
    
    @property
    def net(self) -> Net:
        return self.net_wrapper.net
    
    @property
    def key(self) -> ConnectionKey:
        """Stable identity across wrapper rebuilds."""
        return (self.net.name, self.sink.full_name)
    
    @property
    def is_measured(self) -> bool:
        return not self.direct and self.length is not None
    
    def __str__(self) -> str:
        return f"{self.net.name}: {self.source} -> {self.sink}"


@dataclass(eq=False)
class NetWrapper:
    """Transient view of a net as an ordered list of connections."""
    id: int
    net: Net
    connections: List[Connection] = field(default_factory=list)
    
    def add_connection(self, connection: Connection) -> None:
        if any(c.sink == connection.sink for c in self.connections):
            raise ValueError(f"Duplicate sink {connection.sink} in net {self.net.name}")
        self.connections.append(connection)
    
    @property
    def routable_connections(self) -> List[Connection]:
        return [c for c in self.connections if not c.direct]
    
    def get_connection(self, sink: SitePin) -> Optional[Connection]:
        for connection in self.connections:
            if connection.sink == sink:
                return connection
        return None
