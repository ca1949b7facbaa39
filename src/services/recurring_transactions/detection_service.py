"""
Recurring Transaction Detection Service.

This module orchestrates recurring transaction detection using the
specialized analyzers.

## Detection Pipeline

```mermaid
graph TD
    A[Transactions] --> B[Drop blank merchants]
    B --> C[Group by normalized merchant]
    C --> D{>= 3 in group?}
    D -->|Yes| E[Sort by date]
    E --> F[AmountClusterer]
    F --> G{>= 3 in cluster?}
    G -->|Yes| H[IntervalAnalyzer]
    H --> I{Frequency?}
    I -->|Yes| J[NextOccurrencePredictor]
    J --> K[TypeClassifier]
    K --> L[RecurringTransaction]
```

Groups and clusters that fail a threshold are dropped; finding no recurring
pattern is a normal outcome, not an error.
"""

import logging
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

import numpy as np

from models.recurring_transaction import RecurringTransaction
from models.transaction import Transaction
from services.recurring_transactions.analyzers import (
    AmountClusterer,
    IntervalAnalyzer,
    MerchantNormalizer,
    TypeClassifier,
)
from services.recurring_transactions.config import DEFAULT_CONFIG, DetectionConfig
from services.recurring_transactions.prediction_service import NextOccurrencePredictor
from utils.performance import DetectionPerformanceTracker

logger = logging.getLogger(__name__)


class RecurringPatternDetector:
    """
    Detects recurring transaction patterns from a list of transactions.

    A pattern is reported when at least ``min_occurrences`` transactions:
    1. Share the same normalized merchant
    2. Have amounts within tolerance of the cluster's first amount
    3. Recur at consistent intervals matching a known frequency

    Each call is a full, stateless recomputation.
    """

    def __init__(self, config: Optional[DetectionConfig] = None):
        """
        Initialize the detector.

        Args:
            config: Optional detection configuration. If None, uses DEFAULT_CONFIG.
        """
        self.config = config or DEFAULT_CONFIG

        self.merchant_normalizer = MerchantNormalizer()
        self.amount_clusterer = AmountClusterer(
            tolerance=self.config.amount_clustering.tolerance
        )
        self.interval_analyzer = IntervalAnalyzer(
            thresholds=self.config.frequency_thresholds
        )
        self.predictor = NextOccurrencePredictor(
            day_of_month_config=self.config.day_of_month,
            tz=self.config.tz
        )
        self.type_classifier = TypeClassifier(
            config=self.config.type_classification
        )

    def detect(self, transactions: Sequence[Transaction]) -> List[RecurringTransaction]:
        """
        Detect all recurring transaction patterns.

        Args:
            transactions: Transactions to analyze, in any order

        Returns:
            Detected patterns, in no particular order
        """
        min_occurrences = self.config.min_occurrences

        if len(transactions) < min_occurrences:
            logger.info(f"Insufficient transactions ({len(transactions)}) for pattern detection")
            return []

        patterns: List[RecurringTransaction] = []

        with DetectionPerformanceTracker("recurring_transaction_detection") as tracker:
            tracker.set_transaction_count(len(transactions))

            with tracker.stage("grouping"):
                merchant_groups = self.group_by_merchant(transactions)
            tracker.set_merchant_groups(len(merchant_groups))

            for merchant_pattern, merchant_transactions in merchant_groups.items():
                if len(merchant_transactions) < min_occurrences:
                    logger.debug(f"Skipping {merchant_pattern}: only {len(merchant_transactions)} transactions")
                    continue

                with tracker.stage("clustering"):
                    ordered = sorted(merchant_transactions, key=lambda t: t.date)
                    clusters = self.amount_clusterer.cluster(ordered)
                tracker.add_clusters_analyzed(len(clusters))

                with tracker.stage("pattern_analysis"):
                    for cluster in clusters:
                        if len(cluster) < min_occurrences:
                            continue
                        pattern = self._analyze_cluster(merchant_pattern, cluster)
                        if pattern is not None:
                            patterns.append(pattern)

            tracker.set_patterns_detected(len(patterns))

        return patterns

    def group_by_merchant(self, transactions: Sequence[Transaction]) -> Dict[str, List[Transaction]]:
        """
        Group transactions by normalized merchant.

        Transactions without a usable merchant are skipped.
        """
        groups: Dict[str, List[Transaction]] = {}
        for txn in transactions:
            merchant_pattern = self.merchant_normalizer.normalize(txn.merchant)
            if not merchant_pattern:
                continue
            groups.setdefault(merchant_pattern, []).append(txn)
        return groups

    def _analyze_cluster(
        self,
        merchant_pattern: str,
        cluster: List[Transaction]
    ) -> Optional[RecurringTransaction]:
        """
        Turn one amount cluster into a RecurringTransaction.

        Args:
            merchant_pattern: Normalized merchant
            cluster: Transactions with similar amounts, sorted by date

        Returns:
            RecurringTransaction, or None if the intervals are not regular
        """
        dates = [txn.date for txn in cluster]
        intervals = self.interval_analyzer.calculate_intervals(dates)
        frequency = self.interval_analyzer.analyze_intervals(intervals)

        if frequency is None:
            logger.debug(f"No recurring frequency for {merchant_pattern} ({len(cluster)} transactions)")
            return None

        average_interval = self.interval_analyzer.calculate_average_interval(intervals)
        average_amount = self._average_amount(cluster)
        last_occurrence = max(dates)

        next_expected = self.predictor.predict(dates, frequency, last_occurrence, average_interval)

        recurring_type = self.type_classifier.classify(
            merchant_pattern, average_amount, cluster[0].direction
        )

        return RecurringTransaction(
            merchantPattern=merchant_pattern,
            amount=average_amount,
            frequency=frequency,
            averageInterval=average_interval,
            lastOccurrence=last_occurrence,
            nextExpected=next_expected,
            transactionIds=[txn.transaction_id for txn in cluster],
            isUserConfirmed=False,
            type=recurring_type,
        )

    @staticmethod
    def _average_amount(cluster: List[Transaction]) -> Decimal:
        amounts = [float(txn.amount) for txn in cluster]
        return Decimal(str(np.mean(amounts)))


def detect_recurring_patterns(
    transactions: Sequence[Transaction],
    config: Optional[DetectionConfig] = None
) -> List[RecurringTransaction]:
    """Convenience wrapper around RecurringPatternDetector.detect."""
    return RecurringPatternDetector(config).detect(transactions)
