"""Wirelength measurement results."""
from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional, Tuple

from .device import NodeKind

if TYPE_CHECKING:
    from .connection import Connection, NetWrapper


class WirelengthMap:
    """Accumulated length from the driver for every node reached by a route.
    
    A node is assigned once; later assignments are ignored by the walker,
    so the map is only ever filled in dependency order.
    """
    
    def __init__(self):
        self._lengths: Dict[str, int] = {}
    
    def assign(self, node_id: str, length: int) -> None:
        if node_id in self._lengths:
            raise KeyError(f"Node {node_id} already has an accumulated length")
        self._lengths[node_id] = length
    
    def get(self, node_id: str) -> Optional[int]:
        return self._lengths.get(node_id)
    
    def __contains__(self, node_id: str) -> bool:
        return node_id in self._lengths
    
    def __getitem__(self, node_id: str) -> int:
        return self._lengths[node_id]
    
    def __len__(self) -> int:
        return len(self._lengths)
    
    def __iter__(self) -> Iterator[str]:
        return iter(self._lengths)
    
    def items(self) -> Iterator[Tuple[str, int]]:
        return iter(self._lengths.items())
    
    def as_dict(self) -> Dict[str, int]:
        return dict(self._lengths)
    
    def __eq__(self, other) -> bool:
        if not isinstance(other, WirelengthMap):
            return NotImplemented
        return self._lengths == other._lengths


@dataclass
class MeasurementContext:
    """Per-pass node usage accumulator, merged by the caller across nets."""
    used_nodes: int = 0
    total_wirelength: int = 0
    node_count_by_kind: Dict[NodeKind, int] = field(default_factory=lambda: defaultdict(int))
    length_by_kind: Dict[NodeKind, int] = field(default_factory=lambda: defaultdict(int))
    
    def record(self, kind: NodeKind, length: int) -> None:
        self.used_nodes += 1
        self.total_wirelength += length
        self.node_count_by_kind[kind] += 1
        self.length_by_kind[kind] += length
    
    def merge(self, other: 'MeasurementContext') -> 'MeasurementContext':
        self.used_nodes += other.used_nodes
        self.total_wirelength += other.total_wirelength
        for kind, count in other.node_count_by_kind.items():
            self.node_count_by_kind[kind] += count
        for kind, length in other.length_by_kind.items():
            self.length_by_kind[kind] += length
        return self
    
    def kind_breakdown(self) -> List[Tuple[NodeKind, int, int]]:
        """(kind, node count, length) rows sorted by kind name."""
        return [
            (kind, self.node_count_by_kind[kind], self.length_by_kind.get(kind, 0))
            for kind in sorted(self.node_count_by_kind, key=lambda k: k.value)
        ]


@dataclass
class NetMeasurement:
    """Result of measuring one net."""
    net_name: str
    wirelength_map: WirelengthMap
    sink_lengths: Dict[str, int] = field(default_factory=dict)   # sink pin name -> length
    unrouted_sinks: List[str] = field(default_factory=list)
    
    @property
    def fully_routed(self) -> bool:
        return not self.unrouted_sinks


@dataclass
class DesignMeasurement:
    """Result of one full-design measurement pass."""
    context: MeasurementContext = field(default_factory=MeasurementContext)
    wrappers: List['NetWrapper'] = field(default_factory=list)
    measurements: Dict[str, NetMeasurement] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    
    @property
    def nets_measured(self) -> int:
        return len(self.measurements)
    
    def measured_connections(self) -> List['Connection']:
        """Non-direct connections with a resolved length, in net order."""
        return [
            connection
            for wrapper in self.wrappers
            for connection in wrapper.connections
            if connection.is_measured
        ]
