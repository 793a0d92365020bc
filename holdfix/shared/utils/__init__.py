"""Shared utilities."""
from .logging_utils import setup_logging, get_context_logger, REPAIR_LOGGERS
from .validation_utils import validate_threshold, validate_top_k, validate_node_length
from .performance_utils import timing_context, PhaseTracker

__all__ = [
    'setup_logging', 'get_context_logger', 'REPAIR_LOGGERS',
    'validate_threshold', 'validate_top_k', 'validate_node_length',
    'timing_context', 'PhaseTracker'
]
