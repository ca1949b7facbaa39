"""
Day-of-month pattern analyzer for recurring transaction detection.

Looks at which calendar day monthly occurrences fall on so that prediction
can keep "the 15th" on the 15th and "end of month" on the last day, even
across months of different lengths.
"""

import logging
from collections import Counter
from datetime import timezone, tzinfo
from typing import List, Optional, Sequence

from models.recurring_transaction import DayOfMonthPattern, LastDayOfMonth, SpecificDay
from services.recurring_transactions.config import DayOfMonthPatternConfig
from utils.temporal_utils import from_millis

logger = logging.getLogger(__name__)


class DayOfMonthAnalyzer:
    """
    Detects a day-of-month pattern from a monthly history.

    Checks in priority order:
    1. Every occurrence on the same day D        -> SpecificDay(D)
    2. Every occurrence on day 28 or later       -> LastDayOfMonth
    3. Every occurrence on day 5 or earlier      -> SpecificDay(most frequent day)
    4. One day holds more than half of them      -> SpecificDay(that day)
    5. Otherwise                                 -> None
    """

    def __init__(self, config: Optional[DayOfMonthPatternConfig] = None, tz: tzinfo = timezone.utc):
        """
        Initialize the day-of-month analyzer.

        Args:
            config: Thresholds for the end/start-of-month and dominant-day checks
            tz: Calendar zone the days of month are read in
        """
        self.config = config or DayOfMonthPatternConfig()
        self.tz = tz

    def detect(self, dates: Sequence[int]) -> Optional[DayOfMonthPattern]:
        """
        Detect the day-of-month pattern of a set of timestamps.

        Args:
            dates: Timestamps in milliseconds since epoch (order does not matter)

        Returns:
            SpecificDay, LastDayOfMonth, or None when no pattern is found
        """
        if not dates:
            return None

        days = self.days_of_month(sorted(dates))

        if len(set(days)) == 1:
            return SpecificDay(days[0])

        if all(day >= self.config.end_of_month_min_day for day in days):
            return LastDayOfMonth()

        day_counter = Counter(days)
        most_common_day, day_count = day_counter.most_common(1)[0]

        if all(day <= self.config.start_of_month_max_day for day in days):
            return SpecificDay(most_common_day)

        if day_count / len(days) > self.config.dominant_day_share:
            return SpecificDay(most_common_day)

        logger.debug(f"No day-of-month pattern in days {days}")
        return None

    def days_of_month(self, dates: Sequence[int]) -> List[int]:
        return [from_millis(ts, self.tz).day for ts in dates]
