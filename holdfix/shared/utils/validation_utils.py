"""Validation utilities for holdfix."""
from typing import Any

from ..exceptions import ValidationError


def validate_threshold(threshold: Any) -> None:
    """Validate a minimum wirelength threshold.
    
    Raises:
        ValidationError: If threshold is not a non-negative number
    """
    if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
        raise ValidationError(f"Threshold must be numeric, got {type(threshold)}",
                              field="threshold", value=threshold)
    if threshold < 0:
        raise ValidationError(f"Threshold must be non-negative, got {threshold}",
                              field="threshold", value=threshold)


def validate_top_k(top_k: Any) -> None:
    """Validate the size of a top-K report."""
    if isinstance(top_k, bool) or not isinstance(top_k, int):
        raise ValidationError(f"top_k must be integer, got {type(top_k)}", field="top_k", value=top_k)
    if top_k < 0:
        raise ValidationError(f"top_k must be non-negative, got {top_k}", field="top_k", value=top_k)


def validate_node_length(node_id: str, length: Any) -> None:
    """Validate the intrinsic length of a resource node."""
    if isinstance(length, bool) or not isinstance(length, (int, float)):
        raise ValidationError(f"Node {node_id} length must be numeric, got {type(length)}",
                              field="length", value=length)
    if length < 0:
        raise ValidationError(f"Node {node_id} length must be non-negative, got {length}",
                              field="length", value=length)
