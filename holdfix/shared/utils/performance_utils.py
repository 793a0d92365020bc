"""Phase timing and memory helpers."""
import logging
import time
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Tuple

import psutil

logger = logging.getLogger(__name__)


def _rss_mb() -> float:
    return psutil.Process().memory_info().rss / (1024 * 1024)


@contextmanager
def timing_context(label: str, log_level: int = logging.INFO) -> Iterator[Dict[str, float]]:
    """Time a block and log its duration and resident memory delta.
    
    The yielded dict is filled with ``elapsed_s`` and ``rss_delta_mb`` on exit.
    """
    stats: Dict[str, float] = {}
    start_mem = _rss_mb()
    start = time.perf_counter()
    try:
        yield stats
    finally:
        stats['elapsed_s'] = time.perf_counter() - start
        stats['rss_delta_mb'] = _rss_mb() - start_mem
        logger.log(log_level, f"[{label}] {stats['elapsed_s']:.3f}s, "
                              f"RSS delta {stats['rss_delta_mb']:+.1f} MB")


class PhaseTracker:
    """Sequential phase timer for a batch run."""
    
    def __init__(self, name: str):
        self.name = name
        self.phases: List[Tuple[str, float]] = []
        self._current: Optional[str] = None
        self._started = 0.0
    
    def start(self, phase: str) -> 'PhaseTracker':
        if self._current is not None:
            self.stop()
        self._current = phase
        self._started = time.perf_counter()
        return self
    
    def stop(self) -> 'PhaseTracker':
        if self._current is None:
            return self
        elapsed = time.perf_counter() - self._started
        self.phases.append((self._current, elapsed))
        logger.info(f"[{self.name}] {self._current}: {elapsed:.3f}s")
        self._current = None
        return self
    
    @property
    def total_s(self) -> float:
        return sum(elapsed for _, elapsed in self.phases)
    
    def summary(self) -> Dict[str, float]:
        return {phase: elapsed for phase, elapsed in self.phases}
