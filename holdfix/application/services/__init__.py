"""Application services package."""
from .hold_fix_orchestrator import HoldFixOrchestrator, HoldFixRun

__all__ = ['HoldFixOrchestrator', 'HoldFixRun']
