"""Ranking of measured connections into setup and hold risk lists."""
import heapq
import logging
from typing import Iterable, List, Optional, Tuple

from ..models.connection import Connection
from ..models.measurement import DesignMeasurement
from ..models.report import LengthSummary, RankedConnection, ViolationReport
from ...application.interfaces.topology_oracle import TopologyOracle
from ...shared.configuration.settings import ClassificationSettings
from ...shared.utils.validation_utils import validate_top_k

logger = logging.getLogger(__name__)


class ViolationClassifier:
    """Ranks connections by measured length.

    Longest first is the setup risk proxy. Shortest first, restricted to
    connections whose endpoints sit in different clock regions, is the
    hold risk proxy. Zero or missing lengths are not analyzable and are
    left out of both rankings.
    """

    def __init__(self, oracle: TopologyOracle, settings: Optional[ClassificationSettings] = None):
        self.oracle = oracle
        self.settings = settings or ClassificationSettings()

    def crosses_clock_regions(self, connection: Connection) -> bool:
        axis = self.settings.skew_axis
        source_region = self.oracle.clock_region_of(connection.source.site)
        sink_region = self.oracle.clock_region_of(connection.sink.site)
        return source_region.coordinate(axis) != sink_region.coordinate(axis)

    @staticmethod
    def is_rankable(connection: Connection) -> bool:
        return connection.is_measured and connection.length != 0

    def setup_heap(self, connections: Iterable[Connection]) -> List[Tuple[int, int, Connection]]:
        """Max-heap (negated length) of every rankable connection."""
        heap = [(-c.length, c.id, c) for c in connections if self.is_rankable(c)]
        heapq.heapify(heap)
        return heap

    def hold_heap(self, connections: Iterable[Connection]) -> List[Tuple[int, int, Connection]]:
        """Min-heap of rankable connections that cross clock regions."""
        heap = [
            (c.length, c.id, c) for c in connections
            if self.is_rankable(c) and self.crosses_clock_regions(c)
        ]
        heapq.heapify(heap)
        return heap

    def hold_candidates(self, connections: Iterable[Connection]) -> List[Connection]:
        """Hold-risk candidates in ascending length order."""
        heap = self.hold_heap(connections)
        return [heapq.heappop(heap)[2] for _ in range(len(heap))]

    def top_setup(self, connections: Iterable[Connection], k: Optional[int] = None) -> List[RankedConnection]:
        k = self.settings.top_k if k is None else k
        validate_top_k(k)
        return [
            RankedConnection.from_connection(c, self.crosses_clock_regions(c))
            for c in self._pop_up_to(self.setup_heap(connections), k)
        ]

    def top_hold(self, connections: Iterable[Connection], k: Optional[int] = None) -> List[RankedConnection]:
        k = self.settings.top_k if k is None else k
        validate_top_k(k)
        return [
            RankedConnection.from_connection(c, True)
            for c in self._pop_up_to(self.hold_heap(connections), k)
        ]

    def build_report(self, measurement: DesignMeasurement) -> ViolationReport:
        """Assemble the design-wide report from one measurement pass."""
        connections = measurement.measured_connections()
        report = ViolationReport(
            context=measurement.context,
            setup_ranking=self.top_setup(connections),
            hold_ranking=self.top_hold(connections),
            length_summary=LengthSummary.from_lengths(
                [c.length for c in connections if self.is_rankable(c)]
            ),
            warnings=list(measurement.warnings),
            nets_measured=measurement.nets_measured
        )
        logger.debug(f"Report: {len(report.setup_ranking)} setup, {len(report.hold_ranking)} hold entries")
        return report

    @staticmethod
    def _pop_up_to(heap: List[Tuple[int, int, Connection]], k: int) -> List[Connection]:
        # The ranking may hold fewer than k entries
        popped = []
        while heap and len(popped) < k:
            popped.append(heapq.heappop(heap)[2])
        return popped
