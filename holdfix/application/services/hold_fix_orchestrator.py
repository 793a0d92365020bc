"""Application service for the report, fix, report flow."""
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from ...domain.models.report import RepairResult, ViolationReport
from ...domain.services.classifier import ViolationClassifier
from ...domain.services.net_builder import NetWrapperBuilder
from ...domain.services.repair_scheduler import RepairScheduler
from ...domain.services.wirelength import WirelengthPropagator
from ...shared.configuration.settings import ApplicationSettings
from ...shared.utils.performance_utils import PhaseTracker, timing_context
from ..interfaces.event_publisher import EventPublisher
from ..interfaces.route_accessor import RouteAccessor
from ..interfaces.router_service import RouterService
from ..interfaces.topology_oracle import TopologyOracle

logger = logging.getLogger(__name__)


@dataclass
class HoldFixRun:
    """Everything one end-to-end run produced."""
    before: ViolationReport
    repair: Optional[RepairResult] = None
    after: Optional[ViolationReport] = None
    phase_times: Dict[str, float] = field(default_factory=dict)


class HoldFixOrchestrator:
    """Wires the measurement, ranking and repair services to one design."""

    def __init__(self,
                 oracle: TopologyOracle,
                 routes: RouteAccessor,
                 router: RouterService,
                 settings: Optional[ApplicationSettings] = None,
                 event_publisher: Optional[EventPublisher] = None):
        """Initialize hold fix orchestrator."""
        self.oracle = oracle
        self.routes = routes
        self.router = router
        self.settings = settings or ApplicationSettings()
        self.event_publisher = event_publisher

        self.builder = NetWrapperBuilder(oracle, routes)
        self.propagator = WirelengthPropagator(oracle, routes, self.settings.wirelength, self.builder)
        self.classifier = ViolationClassifier(oracle, self.settings.classification)

    def create_scheduler(self) -> RepairScheduler:
        return RepairScheduler(
            self.routes, self.router, self.propagator, self.classifier,
            self.settings.repair, self.event_publisher
        )

    def compute_statistics_and_report(self) -> ViolationReport:
        """Measure every net and log the statistics report."""
        with timing_context("calculate wirelength"):
            measurement = self.propagator.measure_design()
        with timing_context("report"):
            report = self.classifier.build_report(measurement)
            for line in report.format_lines():
                logger.info(line)
        return report

    def fix_hold_violations(self) -> RepairResult:
        """Run one repair session."""
        with timing_context("fix hold"):
            result = self.create_scheduler().run()
        for abandoned in result.abandoned:
            logger.info(f"Unfixed: {abandoned.net_name}, {abandoned.sink_pin} ({abandoned.reason.value})")
        return result

    def run(self, report_only: bool = False) -> HoldFixRun:
        """Report, repair, then report again.

        Args:
            report_only: Stop after the first report

        Returns:
            HoldFixRun with both reports and the repair result
        """
        tracker = PhaseTracker("holdfix")

        tracker.start("initial report")
        run = HoldFixRun(before=self.compute_statistics_and_report())

        if not report_only:
            tracker.start("repair")
            run.repair = self.fix_hold_violations()

            tracker.start("final report")
            run.after = self.compute_statistics_and_report()

        tracker.stop()
        run.phase_times = tracker.summary()
        logger.info(f"Total runtime: {tracker.total_s:.3f}s")
        return run
