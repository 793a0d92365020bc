"""Domain-specific exceptions."""
from .base_exceptions import HoldFixException, ConfigurationError, RoutingError


class NetModelError(ConfigurationError):
    """Raised when a net cannot be decomposed into connections.
    
    The typical cause is a dedicated carry-out driver feeding a general
    fabric sink while the net has no alternate source pin.
    """
    default_code = "NET_MODEL"
    context_fields = ('net_id', 'pin')
    
    def __init__(self, message: str, net_id: str = None, pin: str = None, **kwargs):
        """Initialize net model error.
        
        Args:
            message: Error message
            net_id: Net that could not be modeled
            pin: Pin that triggered the error
        """
        super().__init__(message, **kwargs)
        self.net_id = net_id
        self.pin = pin


class ModelCorruptionError(RoutingError):
    """Raised when a node or edge committed to a route is unknown to the topology."""
    default_code = "MODEL_CORRUPTION"
    context_fields = ('net_id', 'node_id')
    
    def __init__(self, message: str, net_id: str = None, node_id: str = None, **kwargs):
        """Initialize model corruption error.
        
        Args:
            message: Error message
            net_id: Net whose route referenced the node
            node_id: Node that could not be resolved
        """
        super().__init__(message, net_id=net_id, **kwargs)
        self.node_id = node_id


class DesignLoadError(HoldFixException):
    """Exception raised when a design snapshot cannot be loaded."""
    default_code = "DESIGN_LOAD"
    context_fields = ('file_path',)
    
    def __init__(self, message: str, file_path: str = None, **kwargs):
        """Initialize design load error.
        
        Args:
            message: Error message
            file_path: Path to the snapshot that failed to load
        """
        super().__init__(message, **kwargs)
        self.file_path = file_path
