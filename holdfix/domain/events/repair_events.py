"""Domain events published by the hold repair loop."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import uuid4

from ..models.report import AbandonedConnection, RankedConnection, RepairResult


@dataclass(frozen=True)
class DomainEvent:
    """Base class for all domain events."""
    timestamp: datetime = field(default_factory=datetime.now)
    event_id: str = field(default_factory=lambda: str(uuid4()))


@dataclass(frozen=True)
class RepairSessionStarted(DomainEvent):
    """Event fired when a repair session begins."""
    candidate_count: int = 0
    threshold: int = 0


@dataclass(frozen=True)
class RepairAttempted(DomainEvent):
    """Event fired after each reroute attempt of one connection."""
    net_name: str = ""
    sink_pin: str = ""
    attempt: int = 0
    avoid_set_size: int = 0
    routed: bool = False
    length: Optional[int] = None


@dataclass(frozen=True)
class ConnectionRepaired(DomainEvent):
    """Event fired when a connection reaches the length threshold."""
    connection: Optional[RankedConnection] = None
    attempts: int = 0


@dataclass(frozen=True)
class ConnectionAbandoned(DomainEvent):
    """Event fired when a connection is given up on."""
    abandoned: Optional[AbandonedConnection] = None


@dataclass(frozen=True)
class RepairSessionCompleted(DomainEvent):
    """Event fired when a repair session ends."""
    result: Optional[RepairResult] = None
