"""Report value objects for measurement and repair sessions."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from .connection import Connection
from .measurement import MeasurementContext


@dataclass(frozen=True)
class RankedConnection:
    """Reporting view of one measured connection."""
    net_name: str
    driver_pin: str
    sink_pin: str
    length: int
    crosses_clock_region: bool = False
    
    @classmethod
    def from_connection(cls, connection: Connection, crosses: bool = False) -> 'RankedConnection':
        return cls(
            net_name=connection.net.name,
            driver_pin=connection.source.full_name,
            sink_pin=connection.sink.full_name,
            length=connection.length,
            crosses_clock_region=crosses
        )
    
    def __str__(self) -> str:
        return f"{self.net_name}, {self.driver_pin}, {self.sink_pin}, {self.length}"


@dataclass(frozen=True)
class LengthSummary:
    """Distribution of measured connection lengths."""
    count: int = 0
    minimum: float = 0.0
    median: float = 0.0
    p90: float = 0.0
    maximum: float = 0.0
    
    @classmethod
    def from_lengths(cls, lengths: Sequence[int]) -> 'LengthSummary':
        if len(lengths) == 0:
            return cls()
        values = np.asarray(lengths, dtype=np.float64)
        return cls(
            count=int(values.size),
            minimum=float(values.min()),
            median=float(np.median(values)),
            p90=float(np.percentile(values, 90)),
            maximum=float(values.max())
        )


@dataclass
class ViolationReport:
    """Design-wide measurement report."""
    context: MeasurementContext
    setup_ranking: List[RankedConnection] = field(default_factory=list)
    hold_ranking: List[RankedConnection] = field(default_factory=list)
    length_summary: LengthSummary = field(default_factory=LengthSummary)
    warnings: List[str] = field(default_factory=list)
    nets_measured: int = 0
    
    def format_lines(self) -> List[str]:
        """Plain text report."""
        lines = [
            f"Nets measured: {self.nets_measured}",
            f"Total nodes: {self.context.used_nodes}",
            f"Total wirelength: {self.context.total_wirelength}",
            "Node kind usage:",
        ]
        for kind, count, length in self.context.kind_breakdown():
            lines.append(f"  {kind.value:<12} {count:>8} {length:>10}")
        summary = self.length_summary
        lines.append(
            f"Connection lengths: n={summary.count} min={summary.minimum:g} "
            f"median={summary.median:g} p90={summary.p90:g} max={summary.maximum:g}"
        )
        lines.append("Setup Time:")
        lines.extend(f"  {entry.net_name}, {entry.length}" for entry in self.setup_ranking)
        lines.append("Hold Time:")
        lines.extend(f"  {entry}" for entry in self.hold_ranking)
        if self.warnings:
            lines.append(f"Warnings: {len(self.warnings)}")
        return lines


class AbandonReason(Enum):
    """Why a hold-risk connection could not be repaired."""
    ROUTER_FAILED = "router_failed"
    AVOID_SET_STALLED = "avoid_set_stalled"
    ATTEMPT_LIMIT = "attempt_limit"


@dataclass(frozen=True)
class AbandonedConnection:
    """A connection the repair loop gave up on."""
    net_name: str
    driver_pin: str
    sink_pin: str
    reason: AbandonReason
    last_length: Optional[int] = None
    restored: bool = False    # Prior route put back after the failure
    
    @property
    def sink_left_unrouted(self) -> bool:
        return self.reason == AbandonReason.ROUTER_FAILED and not self.restored


class SessionOutcome(Enum):
    """How a repair session ended."""
    DONE = "done"                        # Frontier reached the threshold or no candidates left
    CONNECTION_LIMIT = "connection_limit"
    TIME_BUDGET = "time_budget"


@dataclass
class RepairResult:
    """Structured outcome of a repair session."""
    repaired: List[RankedConnection] = field(default_factory=list)
    abandoned: List[AbandonedConnection] = field(default_factory=list)
    attempts: int = 0
    outcome: SessionOutcome = SessionOutcome.DONE
    warnings: List[str] = field(default_factory=list)
    
    @property
    def repaired_count(self) -> int:
        return len(self.repaired)
    
    @property
    def abandoned_count(self) -> int:
        return len(self.abandoned)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            'repaired': self.repaired_count,
            'abandoned': [
                {
                    'net': a.net_name,
                    'driver': a.driver_pin,
                    'sink': a.sink_pin,
                    'reason': a.reason.value,
                    'last_length': a.last_length,
                    'restored': a.restored,
                }
                for a in self.abandoned
            ],
            'attempts': self.attempts,
            'outcome': self.outcome.value,
            'warnings': list(self.warnings),
        }
