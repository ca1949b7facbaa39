"""
Pattern analyzers for recurring transaction detection.

This package provides the specialized analyzers the detector chains
together: merchant normalization, amount clustering, interval analysis,
day-of-month pattern detection and type classification.
"""

from services.recurring_transactions.analyzers.merchant import MerchantNormalizer
from services.recurring_transactions.analyzers.amount import AmountClusterer
from services.recurring_transactions.analyzers.frequency import IntervalAnalyzer
from services.recurring_transactions.analyzers.temporal import DayOfMonthAnalyzer
from services.recurring_transactions.analyzers.type_classifier import TypeClassifier

__all__ = [
    'MerchantNormalizer',
    'AmountClusterer',
    'IntervalAnalyzer',
    'DayOfMonthAnalyzer',
    'TypeClassifier',
]
