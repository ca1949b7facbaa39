"""
Configuration classes for recurring transaction detection.

Centralizes all configuration parameters, thresholds, and keyword sets used
in the detection pipeline.
"""

from dataclasses import dataclass
from datetime import timezone, tzinfo
from decimal import Decimal
from typing import Dict, Optional, Tuple

from models.recurring_transaction import RecurringFrequency


@dataclass
class AmountClusteringConfig:
    """Configuration for amount-similarity clustering."""

    tolerance: float = 0.05
    """Maximum deviation from the cluster's first amount, as a fraction of it (5%)."""

    def __post_init__(self):
        if not 0 <= self.tolerance < 1:
            raise ValueError(f"Amount tolerance must be in [0, 1), got {self.tolerance}")


@dataclass
class FrequencyThresholds:
    """
    Interval thresholds for frequency classification.

    Weekly, bi-weekly, quarterly and annual accept the base period plus or
    minus ``int(base * interval_tolerance)`` days. Monthly uses a flat range
    to absorb month-length variation.
    """

    interval_tolerance: float = 0.20
    """Allowed deviation of each interval from the mean interval (20%)."""

    weekly_days: int = 7
    bi_weekly_days: int = 14
    monthly_min_days: int = 28
    monthly_max_days: int = 31
    quarterly_days: int = 90
    annual_days: int = 365

    def __post_init__(self):
        if not 0 <= self.interval_tolerance < 1:
            raise ValueError(f"Interval tolerance must be in [0, 1), got {self.interval_tolerance}")
        if self.monthly_min_days > self.monthly_max_days:
            raise ValueError(
                f"monthly_min_days ({self.monthly_min_days}) must not exceed "
                f"monthly_max_days ({self.monthly_max_days})"
            )

    def tolerance_days(self, base_days: int) -> int:
        """Whole-day tolerance around a base period."""
        return int(base_days * self.interval_tolerance)

    def _around(self, base_days: int) -> Tuple[int, int]:
        tolerance = self.tolerance_days(base_days)
        return (base_days - tolerance, base_days + tolerance)

    def to_dict(self) -> Dict[RecurringFrequency, Tuple[int, int]]:
        """
        Convert thresholds to an ordered mapping of frequency to (min_days, max_days).

        Iteration order is the classification priority: the first range
        containing the average interval wins.
        """
        return {
            RecurringFrequency.WEEKLY: self._around(self.weekly_days),
            RecurringFrequency.BI_WEEKLY: self._around(self.bi_weekly_days),
            RecurringFrequency.MONTHLY: (self.monthly_min_days, self.monthly_max_days),
            RecurringFrequency.QUARTERLY: self._around(self.quarterly_days),
            RecurringFrequency.ANNUAL: self._around(self.annual_days),
        }


@dataclass
class DayOfMonthPatternConfig:
    """Configuration for monthly day-of-month pattern detection."""

    end_of_month_min_day: int = 28
    """Occurrences all on or after this day are treated as end-of-month."""

    start_of_month_max_day: int = 5
    """Occurrences all on or before this day snap to their most frequent day."""

    dominant_day_share: float = 0.5
    """A single day must hold strictly more than this share of occurrences."""

    def __post_init__(self):
        if not 1 <= self.start_of_month_max_day <= 31:
            raise ValueError(f"start_of_month_max_day must be in [1, 31], got {self.start_of_month_max_day}")
        if not 1 <= self.end_of_month_min_day <= 31:
            raise ValueError(f"end_of_month_min_day must be in [1, 31], got {self.end_of_month_min_day}")
        if not 0 <= self.dominant_day_share < 1:
            raise ValueError(f"dominant_day_share must be in [0, 1), got {self.dominant_day_share}")


@dataclass
class TypeClassificationConfig:
    """Thresholds and keyword sets for recurring type classification."""

    salary_min_amount: Decimal = Decimal("10000")
    """Credits strictly above this amount are salary."""

    subscription_max_amount: Decimal = Decimal("1000")
    """Debits strictly below this amount default to subscription."""

    rent_keywords: Tuple[str, ...] = ("RENT", "LANDLORD", "HOUSING")
    emi_keywords: Tuple[str, ...] = ("EMI", "LOAN", "FINANCE", "BAJAJ", "HDFC", "ICICI")
    utility_keywords: Tuple[str, ...] = (
        "ELECTRIC", "ELECTRICITY", "WATER", "GAS", "BILL", "BSES", "TATA POWER"
    )
    subscription_keywords: Tuple[str, ...] = (
        "NETFLIX", "PRIME", "SPOTIFY", "YOUTUBE", "SUBSCRIPTION", "ADOBE", "MICROSOFT"
    )

    emi_exclusions: Tuple[str, ...] = ("PREMIUM",)
    """Words blanked out before the EMI check (PREMIUM contains EMI)."""

    whole_word_keywords: bool = False
    """Match keywords as whole words only (default: anywhere, so HDFCLOAN matches LOAN)."""

    def __post_init__(self):
        self.salary_min_amount = Decimal(str(self.salary_min_amount))
        self.subscription_max_amount = Decimal(str(self.subscription_max_amount))
        if self.salary_min_amount < 0 or self.subscription_max_amount < 0:
            raise ValueError(
                f"Amount thresholds must be non-negative, got salary={self.salary_min_amount}, "
                f"subscription={self.subscription_max_amount}"
            )


class DetectionConfig:
    """
    Master configuration for recurring transaction detection.

    Aggregates all configuration classes into a single configuration object.
    """

    def __init__(
        self,
        amount_clustering: Optional[AmountClusteringConfig] = None,
        frequency_thresholds: Optional[FrequencyThresholds] = None,
        day_of_month: Optional[DayOfMonthPatternConfig] = None,
        type_classification: Optional[TypeClassificationConfig] = None,
        min_occurrences: int = 3,
        tz: tzinfo = timezone.utc
    ):
        """
        Initialize detection configuration.

        Args:
            amount_clustering: Amount clustering config (creates default if None)
            frequency_thresholds: Frequency thresholds config (creates default if None)
            day_of_month: Day-of-month pattern config (creates default if None)
            type_classification: Type classifier config (creates default if None)
            min_occurrences: Minimum transactions for a merchant group or cluster
            tz: Calendar zone used for day-of-month detection and date arithmetic
        """
        if min_occurrences < 2:
            raise ValueError(f"min_occurrences must be at least 2, got {min_occurrences}")
        self.amount_clustering = amount_clustering or AmountClusteringConfig()
        self.frequency_thresholds = frequency_thresholds or FrequencyThresholds()
        self.day_of_month = day_of_month or DayOfMonthPatternConfig()
        self.type_classification = type_classification or TypeClassificationConfig()
        self.min_occurrences = min_occurrences
        self.tz = tz


# Default configuration instance
DEFAULT_CONFIG = DetectionConfig()


# Module constants mirroring the default configuration values
MIN_RECURRING_COUNT = DEFAULT_CONFIG.min_occurrences
AMOUNT_TOLERANCE = DEFAULT_CONFIG.amount_clustering.tolerance
INTERVAL_TOLERANCE = DEFAULT_CONFIG.frequency_thresholds.interval_tolerance

FREQUENCY_THRESHOLDS = DEFAULT_CONFIG.frequency_thresholds.to_dict()
