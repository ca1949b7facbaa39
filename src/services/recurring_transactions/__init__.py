"""
Recurring Transaction Detection and Prediction Services.

This package detects recurring transactions (subscriptions, EMIs, salary,
rent, utilities) in parsed bank transactions, predicts their next
occurrence, and summarizes the results.

Public API:
    - RecurringPatternDetector: Orchestrates detection over a transaction list
    - NextOccurrencePredictor: Calendar-aware next date prediction
    - RecurringSummaryService: Monthly totals, upcoming payments, counts by type
    - DetectionConfig: Configuration for detection parameters
    - DEFAULT_CONFIG: Default configuration instance
"""

from services.recurring_transactions.detection_service import (
    RecurringPatternDetector,
    detect_recurring_patterns,
)
from services.recurring_transactions.prediction_service import NextOccurrencePredictor
from services.recurring_transactions.summary_service import (
    RecurringSummary,
    RecurringSummaryService,
    monthly_equivalent,
)
from services.recurring_transactions.config import (
    DetectionConfig,
    DEFAULT_CONFIG,
    AmountClusteringConfig,
    DayOfMonthPatternConfig,
    FrequencyThresholds,
    TypeClassificationConfig,
)
from services.recurring_transactions.analyzers import (
    AmountClusterer,
    DayOfMonthAnalyzer,
    IntervalAnalyzer,
    MerchantNormalizer,
    TypeClassifier,
)
from services.recurring_transactions.analyzers.merchant import (
    normalize,
    matches,
    matches_any,
)

__all__ = [
    'RecurringPatternDetector',
    'detect_recurring_patterns',
    'NextOccurrencePredictor',
    'RecurringSummary',
    'RecurringSummaryService',
    'monthly_equivalent',
    'DetectionConfig',
    'DEFAULT_CONFIG',
    'AmountClusteringConfig',
    'DayOfMonthPatternConfig',
    'FrequencyThresholds',
    'TypeClassificationConfig',
    'AmountClusterer',
    'DayOfMonthAnalyzer',
    'IntervalAnalyzer',
    'MerchantNormalizer',
    'TypeClassifier',
    'normalize',
    'matches',
    'matches_any',
]
