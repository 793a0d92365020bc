"""Domain models for the device routing resource graph."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict


class NodeKind(Enum):
    """Kinds of routing resource nodes."""
    PIN_OUTPUT = "pin_output"   # Site output pin wire
    PIN_INPUT = "pin_input"     # Site input pin wire
    PINFEED = "pinfeed"         # Fabric wire feeding a site input
    PINBOUNCE = "pinbounce"     # Pass-through bounce inside a switch box
    BOUNCE = "bounce"           # Local distribution node
    SINGLE = "single"
    DOUBLE = "double"
    QUAD = "quad"
    LONG = "long"               # Long line
    BOUNDARY = "boundary"       # Leaves the fine-grained fabric (die crossing, exit)
    CLOCK = "clock"             # Dedicated clock distribution


@dataclass(frozen=True)
class NodeKindInfo:
    """Static properties of a node kind."""
    in_fabric: bool          # Part of the general switching fabric
    detour_free: bool        # Free detour point, never added to an avoid set
    default_length: int      # Length used when a node does not declare one


NODE_KIND_TABLE: Dict[NodeKind, NodeKindInfo] = {
    NodeKind.PIN_OUTPUT: NodeKindInfo(in_fabric=False, detour_free=False, default_length=0),
    NodeKind.PIN_INPUT: NodeKindInfo(in_fabric=False, detour_free=False, default_length=0),
    NodeKind.PINFEED: NodeKindInfo(in_fabric=True, detour_free=False, default_length=0),
    NodeKind.PINBOUNCE: NodeKindInfo(in_fabric=True, detour_free=True, default_length=0),
    NodeKind.BOUNCE: NodeKindInfo(in_fabric=True, detour_free=True, default_length=0),
    NodeKind.SINGLE: NodeKindInfo(in_fabric=True, detour_free=False, default_length=1),
    NodeKind.DOUBLE: NodeKindInfo(in_fabric=True, detour_free=False, default_length=2),
    NodeKind.QUAD: NodeKindInfo(in_fabric=True, detour_free=False, default_length=4),
    NodeKind.LONG: NodeKindInfo(in_fabric=True, detour_free=False, default_length=12),
    NodeKind.BOUNDARY: NodeKindInfo(in_fabric=False, detour_free=False, default_length=0),
    NodeKind.CLOCK: NodeKindInfo(in_fabric=False, detour_free=False, default_length=0),
}


@dataclass(frozen=True)
class ClockRegion:
    """Value object for a clock distribution region."""
    column: int
    row: int
    
    def coordinate(self, axis: str) -> int:
        """Coarse coordinate along the skew axis ('column' or 'row')."""
        if axis == "column":
            return self.column
        if axis == "row":
            return self.row
        raise ValueError(f"Unknown skew axis: {axis}")
    
    def __str__(self) -> str:
        return f"X{self.column}Y{self.row}"


@dataclass(frozen=True)
class Site:
    """Placement site."""
    name: str
    clock_region: ClockRegion = field(compare=False)


@dataclass(frozen=True)
class SitePin:
    """A physical pin on a placed site."""
    site: Site
    name: str
    is_output: bool = field(default=False, compare=False)
    node_id: str = field(default="", compare=False)      # Wire the pin is attached to
    dedicated: bool = field(default=False, compare=False)  # Carry chain pin (COUT/CIN)
    
    @property
    def full_name(self) -> str:
        return f"{self.site.name}.{self.name}"
    
    def __str__(self) -> str:
        return self.full_name


@dataclass(frozen=True)
class ResourceNode:
    """Addressable point in the routing resource graph.
    
    Identity is the node id; kind and length are intrinsic properties
    owned by the topology.
    """
    id: str
    kind: NodeKind = field(compare=False)
    length: int = field(default=0, compare=False)
    
    @property
    def in_fabric(self) -> bool:
        return NODE_KIND_TABLE[self.kind].in_fabric
    
    @property
    def detour_free(self) -> bool:
        return NODE_KIND_TABLE[self.kind].detour_free
    
    def __str__(self) -> str:
        return self.id


@dataclass(frozen=True)
class ResourceEdge:
    """Directed programmable interconnect point between two nodes."""
    start: str
    end: str
    
    def __str__(self) -> str:
        return f"{self.start}->{self.end}"
