"""Abstract point-to-point router interface."""
from abc import ABC, abstractmethod
from typing import AbstractSet, Sequence

from ...domain.models.device import SitePin
from ...domain.models.netlist import Net


class RouterService(ABC):
    """External router invoked once per repair attempt."""
    
    @abstractmethod
    def route(self, net: Net, sinks: Sequence[SitePin], avoid_nodes: AbstractSet[str]) -> bool:
        """Route the given sinks of a net without using any avoid node.
        
        On success the committed route reflects the new paths. On failure
        nothing is committed for the sinks.
        """
        pass
