"""
Tests for detection performance tracking.
"""

import logging

import pytest

from utils.performance import (
    SLOW_OPERATION_MS,
    VERY_SLOW_OPERATION_MS,
    DetectionMetrics,
    DetectionPerformanceTracker,
)


class TestDetectionMetrics:
    """Test the metrics container."""

    def test_finish_sets_elapsed(self):
        metrics = DetectionMetrics(operation_name="detect")
        metrics.finish()
        assert metrics.end_time is not None
        assert metrics.elapsed_ms >= 0

    def test_to_dict(self):
        metrics = DetectionMetrics(operation_name="detect", transaction_count=10, patterns_detected=2)
        metrics.stage_ms["grouping"] = 1.5
        data = metrics.to_dict()

        assert data["operation_name"] == "detect"
        assert data["transaction_count"] == 10
        assert data["patterns_detected"] == 2
        assert data["stage_ms"] == {"grouping": 1.5}
        assert "timestamp" in data

    @pytest.mark.parametrize("elapsed,level", [
        (5.0, logging.INFO),
        (SLOW_OPERATION_MS + 1, logging.WARNING),
        (VERY_SLOW_OPERATION_MS + 1, logging.ERROR),
    ])
    def test_log_level_by_duration(self, caplog, elapsed, level):
        metrics = DetectionMetrics(operation_name="detect")
        metrics.elapsed_ms = elapsed

        with caplog.at_level(logging.DEBUG, logger="utils.performance"):
            metrics.log_metrics()

        assert caplog.records[0].levelno == level
        assert caplog.records[0].detection_metrics["elapsed_ms"] == elapsed


class TestDetectionPerformanceTracker:
    """Test the tracking context manager."""

    def test_tracks_counts_and_stages(self):
        with DetectionPerformanceTracker("detect") as tracker:
            tracker.set_transaction_count(12)
            with tracker.stage("grouping"):
                pass
            tracker.set_merchant_groups(3)
            with tracker.stage("clustering"):
                pass
            with tracker.stage("clustering"):
                pass
            tracker.add_clusters_analyzed(2)
            tracker.add_clusters_analyzed(3)
            tracker.set_patterns_detected(1)

        metrics = tracker.metrics
        assert metrics.transaction_count == 12
        assert metrics.merchant_groups == 3
        assert metrics.clusters_analyzed == 5
        assert metrics.patterns_detected == 1
        assert set(metrics.stage_ms) == {"grouping", "clustering"}
        assert metrics.elapsed_ms is not None

    def test_logs_on_exit_even_when_failing(self, caplog):
        with caplog.at_level(logging.INFO, logger="utils.performance"):
            with pytest.raises(RuntimeError):
                with DetectionPerformanceTracker("detect"):
                    raise RuntimeError("boom")

        assert any("detect" in r.getMessage() for r in caplog.records)
