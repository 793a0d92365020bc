"""Event bus implementation."""
import logging
from collections import defaultdict
from typing import Callable, Type, List, Dict, Any

from ...application.interfaces.event_publisher import EventPublisher
from ...domain.events.repair_events import DomainEvent

logger = logging.getLogger(__name__)


class EventBus(EventPublisher):
    """In-memory event bus implementation."""
    
    def __init__(self, max_history: int = 1000):
        """Initialize event bus."""
        self._subscribers: Dict[Type[DomainEvent], List[Callable]] = defaultdict(list)
        self._event_history: List[DomainEvent] = []
        self._max_history = max_history
    
    def publish(self, event: DomainEvent) -> None:
        """Publish a domain event to its type's subscribers and to DomainEvent subscribers."""
        self._event_history.append(event)
        if len(self._event_history) > self._max_history:
            self._event_history = self._event_history[-self._max_history:]
        
        event_type = type(event)
        handlers = list(self._subscribers.get(event_type, []))
        if event_type is not DomainEvent:
            handlers.extend(self._subscribers.get(DomainEvent, []))
        
        logger.debug(f"Publishing event {event_type.__name__} to {len(handlers)} subscribers")
        
        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                # A failing observer must not abort the repair session
                logger.error(f"Error in event handler for {event_type.__name__}: {e}")
    
    def subscribe(self, event_type: Type[DomainEvent], handler: Callable[[DomainEvent], None]) -> None:
        """Subscribe to an event type."""
        self._subscribers[event_type].append(handler)
        logger.debug(f"Added subscriber for {event_type.__name__}")
    
    def unsubscribe(self, event_type: Type[DomainEvent], handler: Callable[[DomainEvent], None]) -> None:
        """Unsubscribe from an event type."""
        if event_type in self._subscribers:
            try:
                self._subscribers[event_type].remove(handler)
                logger.debug(f"Removed subscriber for {event_type.__name__}")
            except ValueError:
                logger.warning(f"Handler not found in subscribers for {event_type.__name__}")
    
    def get_event_history(self, count: int = 100) -> List[DomainEvent]:
        """Get recent event history."""
        return self._event_history[-count:] if count < len(self._event_history) else self._event_history.copy()
    
    def get_statistics(self) -> Dict[str, Any]:
        """Get event bus statistics."""
        event_type_counts = defaultdict(int)
        for event in self._event_history:
            event_type_counts[type(event).__name__] += 1
        
        return {
            'total_events_published': len(self._event_history),
            'event_types': dict(event_type_counts),
            'total_subscribers': sum(len(handlers) for handlers in self._subscribers.values()),
            'max_history': self._max_history
        }
