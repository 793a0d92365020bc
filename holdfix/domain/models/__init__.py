"""Domain models package."""
from .device import (
    NodeKind, NodeKindInfo, NODE_KIND_TABLE,
    ClockRegion, Site, SitePin, ResourceNode, ResourceEdge
)
from .netlist import Net, NetType
from .connection import Connection, ConnectionKey, NetWrapper
from .measurement import WirelengthMap, MeasurementContext, NetMeasurement, DesignMeasurement
from .report import (
    RankedConnection, LengthSummary, ViolationReport,
    AbandonReason, AbandonedConnection, SessionOutcome, RepairResult
)

__all__ = [
    'NodeKind', 'NodeKindInfo', 'NODE_KIND_TABLE',
    'ClockRegion', 'Site', 'SitePin', 'ResourceNode', 'ResourceEdge',
    'Net', 'NetType', 'Connection', 'ConnectionKey', 'NetWrapper',
    'WirelengthMap', 'MeasurementContext', 'NetMeasurement', 'DesignMeasurement',
    'RankedConnection', 'LengthSummary', 'ViolationReport',
    'AbandonReason', 'AbandonedConnection', 'SessionOutcome', 'RepairResult'
]
