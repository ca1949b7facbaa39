"""
Recurring Summary Service.

Aggregations and queries over detected recurring transactions: monthly
equivalent totals, upcoming payments, and counts by type. Operates purely on
lists the caller already holds; nothing is stored.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.recurring_transaction import (
    RecurringFrequency,
    RecurringTransaction,
    RecurringType,
)
from services.recurring_transactions.analyzers.merchant import MerchantNormalizer
from utils.temporal_utils import MILLIS_IN_DAY

logger = logging.getLogger(__name__)


def monthly_equivalent(recurring: RecurringTransaction) -> Decimal:
    """Per-month amount for a recurring transaction."""
    return recurring.monthly_equivalent_amount()


class RecurringSummary(BaseModel):
    """Summary statistics for a set of recurring transactions."""
    total_monthly_recurring: Decimal = Field(alias="totalMonthlyRecurring")
    confirmed_count: int = Field(alias="confirmedCount", ge=0)
    upcoming_count: int = Field(alias="upcomingCount", ge=0)
    count_by_type: Dict[RecurringType, int] = Field(alias="countByType")

    model_config = ConfigDict(
        populate_by_name=True,
        json_encoders={
            Decimal: str
        },
        use_enum_values=False
    )


class RecurringSummaryService:
    """Queries and aggregates over detected recurring transactions."""

    def __init__(self, merchant_normalizer: Optional[MerchantNormalizer] = None):
        self.merchant_normalizer = merchant_normalizer or MerchantNormalizer()

    def calculate_monthly_total(
        self,
        records: Iterable[RecurringTransaction],
        confirmed_only: bool = False
    ) -> Decimal:
        """
        Sum of monthly equivalents.

        Args:
            records: Recurring transactions
            confirmed_only: Only include user-confirmed patterns

        Returns:
            Estimated total recurring amount per month
        """
        return sum(
            (monthly_equivalent(r) for r in records if r.is_user_confirmed or not confirmed_only),
            Decimal("0"),
        )

    def by_frequency(
        self, records: Iterable[RecurringTransaction], frequency: RecurringFrequency
    ) -> List[RecurringTransaction]:
        return [r for r in records if r.frequency == frequency]

    def by_type(
        self, records: Iterable[RecurringTransaction], recurring_type: RecurringType
    ) -> List[RecurringTransaction]:
        return [r for r in records if r.recurring_type == recurring_type]

    def by_merchant_pattern(
        self, records: Iterable[RecurringTransaction], merchant: str
    ) -> List[RecurringTransaction]:
        """Records whose merchant pattern matches ``merchant`` after normalization."""
        target = self.merchant_normalizer.normalize(merchant)
        return [r for r in records if r.merchant_pattern == target]

    def confirmed(self, records: Iterable[RecurringTransaction]) -> List[RecurringTransaction]:
        return [r for r in records if r.is_user_confirmed]

    def unconfirmed(self, records: Iterable[RecurringTransaction]) -> List[RecurringTransaction]:
        return [r for r in records if not r.is_user_confirmed]

    def upcoming(
        self, records: Iterable[RecurringTransaction], now_ms: Optional[int] = None
    ) -> List[RecurringTransaction]:
        """Records expected at or after ``now_ms``, soonest first."""
        now_ms = _now_ms() if now_ms is None else now_ms
        return sorted(
            (r for r in records if r.next_expected >= now_ms),
            key=lambda r: r.next_expected,
        )

    def in_window(
        self, records: Iterable[RecurringTransaction], start_ms: int, end_ms: int
    ) -> List[RecurringTransaction]:
        """Records expected within [start_ms, end_ms], soonest first."""
        if end_ms < start_ms:
            raise ValueError(f"Window end ({end_ms}) is before start ({start_ms})")
        return sorted(
            (r for r in records if start_ms <= r.next_expected <= end_ms),
            key=lambda r: r.next_expected,
        )

    def next_upcoming(
        self, records: Iterable[RecurringTransaction], now_ms: Optional[int] = None
    ) -> Optional[RecurringTransaction]:
        upcoming = self.upcoming(records, now_ms)
        return upcoming[0] if upcoming else None

    def summarize(
        self,
        records: Iterable[RecurringTransaction],
        now_ms: Optional[int] = None,
        upcoming_days: int = 7
    ) -> RecurringSummary:
        """
        Summary statistics for display.

        Args:
            records: Recurring transactions
            now_ms: Reference time (default: now)
            upcoming_days: Window used for the upcoming count

        Returns:
            RecurringSummary
        """
        records = list(records)
        now_ms = _now_ms() if now_ms is None else now_ms

        count_by_type = {recurring_type: 0 for recurring_type in RecurringType}
        for r in records:
            count_by_type[r.recurring_type] += 1

        summary = RecurringSummary(
            totalMonthlyRecurring=self.calculate_monthly_total(records),
            confirmedCount=len(self.confirmed(records)),
            upcomingCount=len(self.in_window(records, now_ms, now_ms + upcoming_days * MILLIS_IN_DAY)),
            countByType=count_by_type,
        )
        logger.debug(
            f"Summarized {len(records)} recurring transactions: "
            f"{summary.upcoming_count} due within {upcoming_days} days"
        )
        return summary


def _now_ms() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)
