"""
holdfix - wirelength measurement and hold-time repair for routed FPGA designs
"""

# Version information
__version__ = "1.0.0"
__description__ = "Post-route wirelength measurement and hold-risk connection repair"

from .application.services.hold_fix_orchestrator import HoldFixOrchestrator, HoldFixRun
from .domain.models.report import RepairResult, ViolationReport
from .infrastructure.serialization import DesignSnapshot, load_design, save_design

__all__ = [
    'HoldFixOrchestrator', 'HoldFixRun', 'RepairResult', 'ViolationReport',
    'DesignSnapshot', 'load_design', 'save_design'
]
