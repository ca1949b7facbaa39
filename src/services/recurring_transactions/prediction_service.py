"""
Next Occurrence Prediction Service.

This module predicts the next expected date of a detected recurring
transaction. Weekly, bi-weekly, quarterly and annual patterns step forward
by calendar weeks, months or years. Monthly patterns first look for a
day-of-month pattern in the history (a fixed day, or the end of the month)
and keep it across months of different lengths.
"""

import logging
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Callable, Dict, Optional, Sequence

from models.recurring_transaction import (
    DayOfMonthPattern,
    LastDayOfMonth,
    RecurringFrequency,
    SpecificDay,
)
from services.recurring_transactions.analyzers.temporal import DayOfMonthAnalyzer
from services.recurring_transactions.config import DayOfMonthPatternConfig
from utils.temporal_utils import (
    add_months,
    add_weeks,
    add_years,
    from_millis,
    to_millis,
    with_day_clamped,
    with_last_day_of_month,
)

logger = logging.getLogger(__name__)

# Calendar step for every frequency except monthly, which is pattern-aware
FREQUENCY_STEPS: Dict[RecurringFrequency, Callable[[datetime], datetime]] = {
    RecurringFrequency.WEEKLY: lambda dt: add_weeks(dt, 1),
    RecurringFrequency.BI_WEEKLY: lambda dt: add_weeks(dt, 2),
    RecurringFrequency.QUARTERLY: lambda dt: add_months(dt, 3),
    RecurringFrequency.ANNUAL: lambda dt: add_years(dt, 1),
}


class NextOccurrencePredictor:
    """
    Predicts the next occurrence of a recurring transaction.

    Handles:
    - Calendar week/month/year steps for non-monthly frequencies
    - Day-of-month preservation for monthly patterns (day 31 -> 30 in a 30-day month)
    - End-of-month patterns (Jan 31 -> Feb 28/29 -> Mar 31)
    """

    def __init__(
        self,
        day_of_month_config: Optional[DayOfMonthPatternConfig] = None,
        tz: tzinfo = timezone.utc
    ):
        """
        Initialize the predictor.

        Args:
            day_of_month_config: Thresholds for day-of-month pattern detection
            tz: Calendar zone used for date arithmetic (default: UTC)
        """
        self.tz = tz
        self.day_of_month_analyzer = DayOfMonthAnalyzer(day_of_month_config, tz=tz)

    def predict(
        self,
        sorted_dates: Sequence[int],
        frequency: RecurringFrequency,
        last_occurrence: int,
        average_interval: int
    ) -> int:
        """
        Predict the next expected timestamp.

        Args:
            sorted_dates: Timestamps of the pattern's transactions, ascending
            frequency: Detected frequency
            last_occurrence: Timestamp of the most recent transaction
            average_interval: Mean days between transactions

        Returns:
            Predicted timestamp in milliseconds since epoch

        Raises:
            ValueError: If no dates are supplied
        """
        if not sorted_dates:
            raise ValueError("Cannot predict next occurrence without transaction dates")

        last = from_millis(last_occurrence, self.tz)

        if frequency == RecurringFrequency.MONTHLY:
            next_date = self._next_monthly(sorted_dates, last)
        elif frequency in FREQUENCY_STEPS:
            next_date = FREQUENCY_STEPS[frequency](last)
        else:
            logger.warning(f"No calendar step for frequency {frequency}, using {average_interval} days")
            next_date = last + timedelta(days=max(average_interval, 1))

        return to_millis(next_date)

    def _next_monthly(self, dates: Sequence[int], last: datetime) -> datetime:
        """Advance one calendar month, then apply the detected day-of-month pattern."""
        pattern = self.day_of_month_analyzer.detect(dates)
        next_month = add_months(last, 1)

        if pattern is None:
            # Plain calendar step; relativedelta clamps to the month end
            return next_month

        return self.apply_pattern(next_month, pattern)

    @staticmethod
    def apply_pattern(target: datetime, pattern: DayOfMonthPattern) -> datetime:
        """
        Place ``target`` on the pattern's day within its month.

        Args:
            target: A datetime in the month the occurrence is expected in
            pattern: SpecificDay or LastDayOfMonth

        Returns:
            Datetime on the pattern day, time of day preserved
        """
        if isinstance(pattern, SpecificDay):
            return with_day_clamped(target, pattern.day)
        if isinstance(pattern, LastDayOfMonth):
            return with_last_day_of_month(target)
        raise TypeError(f"Unknown day-of-month pattern: {pattern!r}")
