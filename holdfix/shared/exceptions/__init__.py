"""Shared exceptions for holdfix."""
from .base_exceptions import (
    HoldFixException, ConfigurationError, ValidationError, RoutingError
)
from .domain_exceptions import (
    NetModelError, ModelCorruptionError, DesignLoadError
)

__all__ = [
    'HoldFixException', 'ConfigurationError', 'ValidationError', 'RoutingError',
    'NetModelError', 'ModelCorruptionError', 'DesignLoadError'
]
