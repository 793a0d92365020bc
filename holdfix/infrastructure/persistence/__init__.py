"""Persistence infrastructure."""
from .memory_route_store import MemoryRouteStore
from .event_bus import EventBus

__all__ = ['MemoryRouteStore', 'EventBus']
