"""
Interval analyzer for recurring transaction detection.

Analyzes the gaps between a cluster's transactions to decide whether they
recur regularly and, if so, at which named frequency.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from models.recurring_transaction import RecurringFrequency
from models.transaction import Transaction
from services.recurring_transactions.config import FrequencyThresholds
from utils.temporal_utils import days_between

logger = logging.getLogger(__name__)


class IntervalAnalyzer:
    """
    Analyzes transaction intervals to detect recurrence frequency.

    Intervals must all lie within ``interval_tolerance`` of their mean to be
    considered recurring. The truncated mean is then matched against the
    frequency ranges in priority order (weekly, bi-weekly, monthly,
    quarterly, annual); the first range that contains it wins.
    """

    def __init__(self, thresholds: Optional[FrequencyThresholds] = None):
        """
        Initialize the interval analyzer.

        Args:
            thresholds: Frequency thresholds (creates default if None)
        """
        self.thresholds = thresholds or FrequencyThresholds()
        self.frequency_ranges: Dict[RecurringFrequency, Tuple[int, int]] = self.thresholds.to_dict()

    def analyze(self, dates: Sequence[int]) -> Optional[RecurringFrequency]:
        """
        Detect the frequency of an ascending sequence of timestamps.

        Examples (as intervals in days):
            [7, 7, 7]          -> WEEKLY
            [14, 14, 13]       -> BI_WEEKLY
            [30, 31, 30, 29]   -> MONTHLY
            [90, 92, 89]       -> QUARTERLY
            [7, 30, 90]        -> None (inconsistent)

        Args:
            dates: Timestamps in milliseconds since epoch, ascending

        Returns:
            RecurringFrequency, or None when there is no regular pattern
        """
        return self.analyze_intervals(self.calculate_intervals(dates))

    def analyze_transactions(self, cluster_transactions: Sequence[Transaction]) -> Optional[RecurringFrequency]:
        """Detect the frequency of a date-sorted list of transactions."""
        return self.analyze([txn.date for txn in cluster_transactions])

    def analyze_intervals(self, intervals: Sequence[int]) -> Optional[RecurringFrequency]:
        """Consistency check followed by frequency matching."""
        if not intervals:
            return None

        if not self.are_intervals_consistent(intervals):
            logger.debug(f"Intervals {list(intervals)} are not consistent")
            return None

        return self.detect_frequency(self.calculate_average_interval(intervals))

    def calculate_intervals(self, dates: Sequence[int]) -> List[int]:
        """
        Whole-day intervals between consecutive timestamps.

        Args:
            dates: Timestamps in milliseconds since epoch, ascending

        Returns:
            List of intervals in days (empty for fewer than two dates)
        """
        return [days_between(dates[i], dates[i + 1]) for i in range(len(dates) - 1)]

    def are_intervals_consistent(self, intervals: Sequence[int]) -> bool:
        """
        Check that every interval lies within tolerance of the mean interval.

        A single interval is always consistent; an empty list never is.
        """
        if not intervals:
            return False
        if len(intervals) == 1:
            return True

        average = float(np.mean(intervals))
        allowed = average * self.thresholds.interval_tolerance
        return all(abs(interval - average) <= allowed for interval in intervals)

    def detect_frequency(self, average_interval: int) -> Optional[RecurringFrequency]:
        """
        Match a (truncated) average interval to a named frequency.

        Args:
            average_interval: Average days between transactions

        Returns:
            First frequency whose range contains the interval, or None
        """
        for frequency, (min_days, max_days) in self.frequency_ranges.items():
            if min_days <= average_interval <= max_days:
                return frequency
        return None

    @staticmethod
    def calculate_average_interval(intervals: Sequence[int]) -> int:
        """Mean interval truncated to whole days, or 0 for no intervals."""
        if not intervals:
            return 0
        return int(np.mean(intervals))

    @staticmethod
    def calculate_standard_deviation(intervals: Sequence[int]) -> float:
        """Population standard deviation of the intervals, or 0.0 for no intervals."""
        if not intervals:
            return 0.0
        return float(np.std(intervals))

    def get_tolerance_range(self, average_interval: int) -> Tuple[int, int]:
        """
        Acceptable (min, max) interval around an average.

        Example: 30 -> (24, 36), 7 -> (6, 8)
        """
        tolerance = self.thresholds.tolerance_days(average_interval)
        return (average_interval - tolerance, average_interval + tolerance)
