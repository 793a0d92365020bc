"""Domain events package."""
from .repair_events import (
    DomainEvent, RepairSessionStarted, RepairAttempted,
    ConnectionRepaired, ConnectionAbandoned, RepairSessionCompleted
)

__all__ = [
    'DomainEvent', 'RepairSessionStarted', 'RepairAttempted',
    'ConnectionRepaired', 'ConnectionAbandoned', 'RepairSessionCompleted'
]
