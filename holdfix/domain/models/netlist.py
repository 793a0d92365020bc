"""Domain models for nets."""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .device import SitePin


class NetType(Enum):
    """Types of physical nets."""
    WIRE = "wire"
    CLOCK = "clock"
    VCC = "vcc"
    GND = "gnd"


@dataclass(eq=False)
class Net:
    """Domain entity representing a placed net and its pins."""
    name: str
    source: Optional[SitePin] = None
    sinks: List[SitePin] = field(default_factory=list)
    alternate_source: Optional[SitePin] = None
    net_type: NetType = NetType.WIRE
    
    @property
    def is_routable(self) -> bool:
        """A net needs routing when it has a source and at least one sink."""
        return self.source is not None and len(self.sinks) > 0
    
    def get_sink(self, full_name: str) -> Optional[SitePin]:
        for sink in self.sinks:
            if sink.full_name == full_name:
                return sink
        return None
    
    def __str__(self) -> str:
        return self.name
