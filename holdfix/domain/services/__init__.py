"""Domain services package."""
from .net_builder import NetWrapperBuilder
from .wirelength import WirelengthPropagator
from .classifier import ViolationClassifier
from .repair_scheduler import RepairScheduler, SchedulerState

__all__ = [
    'NetWrapperBuilder', 'WirelengthPropagator', 'ViolationClassifier',
    'RepairScheduler', 'SchedulerState'
]
