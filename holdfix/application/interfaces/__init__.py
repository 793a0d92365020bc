"""Application interfaces package."""
from .topology_oracle import TopologyOracle
from .route_accessor import RouteAccessor
from .router_service import RouterService
from .event_publisher import EventPublisher

__all__ = ['TopologyOracle', 'RouteAccessor', 'RouterService', 'EventPublisher']
