"""
Performance monitoring utilities for recurring transaction detection.

Tracks per-stage timing and the number of items flowing through each stage
of a detection run, and emits one structured log line per run:
- Merchant grouping time
- Amount clustering time
- Pattern analysis time
- Total execution time
"""

import time
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

SLOW_OPERATION_MS = 10000
VERY_SLOW_OPERATION_MS = 30000


@dataclass
class DetectionMetrics:
    """Container for detection run performance metrics."""
    operation_name: str
    start_time: float = field(default_factory=time.perf_counter)
    end_time: Optional[float] = None
    elapsed_ms: Optional[float] = None
    stage_ms: Dict[str, float] = field(default_factory=dict)
    transaction_count: int = 0
    merchant_groups: int = 0
    clusters_analyzed: int = 0
    patterns_detected: int = 0

    def finish(self):
        """Mark the operation as finished and calculate elapsed time."""
        self.end_time = time.perf_counter()
        self.elapsed_ms = (self.end_time - self.start_time) * 1000

    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics to dictionary for logging."""
        return {
            'operation_name': self.operation_name,
            'elapsed_ms': self.elapsed_ms,
            'stage_ms': dict(self.stage_ms),
            'transaction_count': self.transaction_count,
            'merchant_groups': self.merchant_groups,
            'clusters_analyzed': self.clusters_analyzed,
            'patterns_detected': self.patterns_detected,
            'timestamp': datetime.now(timezone.utc).isoformat()
        }

    def log_metrics(self):
        """Log the performance metrics."""
        metrics = self.to_dict()
        elapsed = self.elapsed_ms or 0.0

        # Log level depends on how long the run took
        if elapsed > VERY_SLOW_OPERATION_MS:
            logger.error(
                f"SLOW DETECTION: {self.operation_name} took {elapsed:.2f}ms",
                extra={'detection_metrics': metrics}
            )
        elif elapsed > SLOW_OPERATION_MS:
            logger.warning(
                f"Slow detection: {self.operation_name} took {elapsed:.2f}ms",
                extra={'detection_metrics': metrics}
            )
        else:
            logger.info(
                f"Detection completed: {self.operation_name} in {elapsed:.2f}ms "
                f"({self.transaction_count} transactions, {self.patterns_detected} patterns)",
                extra={'detection_metrics': metrics}
            )

        if self.stage_ms:
            breakdown = ', '.join(f"{stage}: {ms:.2f}ms" for stage, ms in self.stage_ms.items())
            logger.debug(
                f"Detection breakdown for {self.operation_name}: {breakdown}",
                extra={'detection_metrics': metrics}
            )


class _StageTimer:
    def __init__(self, metrics: DetectionMetrics, stage: str):
        self.metrics = metrics
        self.stage = stage
        self.start_time: float = 0.0

    def __enter__(self):
        self.start_time = time.perf_counter()
        logger.debug(f"Starting stage: {self.stage}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed_ms = (time.perf_counter() - self.start_time) * 1000
        # Stages may be entered repeatedly (once per merchant group)
        self.metrics.stage_ms[self.stage] = self.metrics.stage_ms.get(self.stage, 0.0) + elapsed_ms
        logger.debug(f"Completed stage {self.stage} in {elapsed_ms:.2f}ms")


class DetectionPerformanceTracker:
    """
    Context manager for detection performance tracking.

    Usage:
        with DetectionPerformanceTracker("recurring_detection") as tracker:
            tracker.set_transaction_count(len(transactions))

            with tracker.stage('grouping'):
                groups = group_by_merchant(transactions)
            tracker.set_merchant_groups(len(groups))

            with tracker.stage('clustering'):
                clusters = cluster(groups)

            tracker.set_patterns_detected(len(patterns))
    """

    def __init__(self, operation_name: str):
        self.metrics = DetectionMetrics(operation_name=operation_name)

    def __enter__(self):
        logger.debug(f"Starting detection: {self.metrics.operation_name}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.metrics.finish()
        self.metrics.log_metrics()

    def stage(self, stage_name: str) -> _StageTimer:
        """Create a context manager for tracking a stage."""
        return _StageTimer(self.metrics, stage_name)

    def set_transaction_count(self, count: int):
        self.metrics.transaction_count = count

    def set_merchant_groups(self, count: int):
        self.metrics.merchant_groups = count

    def add_clusters_analyzed(self, count: int):
        self.metrics.clusters_analyzed += count

    def set_patterns_detected(self, count: int):
        self.metrics.patterns_detected = count
