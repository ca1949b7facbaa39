"""
Amount clusterer for recurring transaction detection.

Splits one merchant's transactions into groups of similar amounts so that,
for example, a 499 streaming plan and a 649 upgrade are analyzed separately.
"""

import logging
from decimal import Decimal
from typing import List, Sequence

from models.transaction import Transaction

logger = logging.getLogger(__name__)


class AmountClusterer:
    """
    Greedy single-pass amount clustering.

    Each transaction joins the first existing cluster whose *first* member's
    amount is within ``tolerance`` of it; otherwise it starts a new cluster.
    Clusters anchor to their first member, not a running mean, so a slowly
    drifting amount (100, 104, 108, 112) splits into several clusters even
    though each step is within tolerance of the previous one.
    """

    def __init__(self, tolerance: float = 0.05):
        """
        Initialize the amount clusterer.

        Args:
            tolerance: Allowed deviation as a fraction of the cluster's first amount (default: 5%)
        """
        self.tolerance = Decimal(str(tolerance))

    def cluster(self, transactions: Sequence[Transaction]) -> List[List[Transaction]]:
        """
        Partition transactions into amount clusters.

        Args:
            transactions: One merchant's transactions, sorted by date

        Returns:
            Non-empty clusters, each preserving the input order
        """
        clusters: List[List[Transaction]] = []

        for txn in transactions:
            for cluster in clusters:
                if self.is_amount_similar(txn.amount, cluster[0].amount):
                    cluster.append(txn)
                    break
            else:
                clusters.append([txn])

        logger.debug(f"Clustered {len(transactions)} transactions into {len(clusters)} amount groups")
        return clusters

    def is_amount_similar(self, amount: Decimal, head_amount: Decimal) -> bool:
        """
        Check whether ``amount`` is within tolerance of a cluster head.

        The band scales with the head amount, so a zero head only accepts
        exact zeros.
        """
        return abs(amount - head_amount) <= abs(head_amount) * self.tolerance
