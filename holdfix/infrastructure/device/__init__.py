"""Device topology infrastructure."""
from .memory_topology import MemoryTopology

__all__ = ['MemoryTopology']
