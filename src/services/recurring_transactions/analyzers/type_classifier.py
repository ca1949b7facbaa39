"""
Recurring type classifier.

Labels a detected pattern as salary, rent, EMI, utility, subscription or
other using merchant keywords, the direction of money movement and the
average amount.
"""

import logging
import re
from decimal import Decimal
from typing import Iterable, Optional, Pattern

from models.recurring_transaction import RecurringType
from models.transaction import TransactionDirection
from services.recurring_transactions.config import TypeClassificationConfig

logger = logging.getLogger(__name__)


def _keyword_regex(keywords: Iterable[str], whole_word: bool = False) -> Optional[Pattern[str]]:
    alternation = "|".join(re.escape(k.upper()) for k in keywords)
    if not alternation:
        return None
    if whole_word:
        return re.compile(rf"\b(?:{alternation})\b")
    return re.compile(alternation)


def _matches(pattern: Optional[Pattern[str]], merchant_pattern: str) -> bool:
    return pattern is not None and pattern.search(merchant_pattern) is not None


class TypeClassifier:
    """
    Ordered decision list for recurring type; the first matching rule wins.

    Keywords match anywhere in the normalized merchant unless
    ``whole_word_keywords`` is set. Words in ``emi_exclusions`` (PREMIUM) are
    blanked out before the EMI check.

    1. Credit above the salary threshold          -> SALARY
    2. Rent keyword                                -> RENT
    3. EMI/lender keyword on a debit               -> EMI
    4. Utility keyword                             -> UTILITY
    5. Subscription keyword, or a small debit      -> SUBSCRIPTION
    6. Anything else                               -> OTHER
    """

    def __init__(self, config: Optional[TypeClassificationConfig] = None):
        """
        Initialize the classifier.

        Args:
            config: Thresholds and keyword sets (creates default if None)
        """
        self.config = config or TypeClassificationConfig()
        whole_word = self.config.whole_word_keywords
        self._rent_re = _keyword_regex(self.config.rent_keywords, whole_word)
        self._emi_re = _keyword_regex(self.config.emi_keywords, whole_word)
        self._emi_exclusion_re = _keyword_regex(self.config.emi_exclusions, whole_word)
        self._utility_re = _keyword_regex(self.config.utility_keywords, whole_word)
        self._subscription_re = _keyword_regex(self.config.subscription_keywords, whole_word)

    def classify(
        self,
        merchant_pattern: str,
        average_amount: Decimal,
        direction: TransactionDirection
    ) -> RecurringType:
        """
        Classify a recurring pattern.

        Args:
            merchant_pattern: Normalized merchant name
            average_amount: Mean amount of the pattern's transactions
            direction: Direction of the pattern's transactions

        Returns:
            RecurringType for the pattern
        """
        is_credit = direction == TransactionDirection.CREDIT
        is_debit = direction == TransactionDirection.DEBIT

        if is_credit and average_amount > self.config.salary_min_amount:
            return RecurringType.SALARY

        if _matches(self._rent_re, merchant_pattern):
            return RecurringType.RENT

        if is_debit and self._is_emi(merchant_pattern):
            return RecurringType.EMI

        if _matches(self._utility_re, merchant_pattern):
            return RecurringType.UTILITY

        if _matches(self._subscription_re, merchant_pattern) or (
            is_debit and average_amount < self.config.subscription_max_amount
        ):
            return RecurringType.SUBSCRIPTION

        return RecurringType.OTHER

    def _is_emi(self, merchant_pattern: str) -> bool:
        if self._emi_exclusion_re is not None:
            merchant_pattern = self._emi_exclusion_re.sub(" ", merchant_pattern)
        return _matches(self._emi_re, merchant_pattern)
