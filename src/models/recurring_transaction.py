"""
Recurring Transaction Models.

This module provides the Pydantic model for detected recurring transaction
patterns, the enums describing their frequency and type, and the
day-of-month pattern used for calendar-aware monthly prediction.
"""

import uuid
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Union

from pydantic import BaseModel, Field, field_validator, model_validator, ConfigDict
from typing_extensions import Self

logger = logging.getLogger(__name__)

# Constants
TIMESTAMP_ERROR_MESSAGE = "Timestamp must be a positive integer representing milliseconds since epoch"
NEXT_EXPECTED_ERROR_MESSAGE = "nextExpected must be later than lastOccurrence"


class RecurringFrequency(str, Enum):
    """Named recurrence period matched from the average interval."""
    WEEKLY = "weekly"          # ~7 day intervals
    BI_WEEKLY = "bi_weekly"    # ~14 day intervals
    MONTHLY = "monthly"        # 28-31 day intervals
    QUARTERLY = "quarterly"    # ~90 day intervals
    ANNUAL = "annual"          # ~365 day intervals

    @property
    def display_name(self) -> str:
        return _FREQUENCY_DISPLAY_NAMES[self]


_FREQUENCY_DISPLAY_NAMES = {
    RecurringFrequency.WEEKLY: "Weekly",
    RecurringFrequency.BI_WEEKLY: "Bi-weekly",
    RecurringFrequency.MONTHLY: "Monthly",
    RecurringFrequency.QUARTERLY: "Quarterly",
    RecurringFrequency.ANNUAL: "Annual",
}

# Multipliers converting one occurrence into a per-month amount
MONTHLY_MULTIPLIERS: Dict[RecurringFrequency, Decimal] = {
    RecurringFrequency.WEEKLY: Decimal("4.33"),      # Average weeks per month
    RecurringFrequency.BI_WEEKLY: Decimal("2.17"),
    RecurringFrequency.MONTHLY: Decimal("1"),
    RecurringFrequency.QUARTERLY: Decimal("1") / Decimal("3"),
    RecurringFrequency.ANNUAL: Decimal("1") / Decimal("12"),
}


class RecurringType(str, Enum):
    """Category of a recurring transaction."""
    SUBSCRIPTION = "subscription"
    EMI = "emi"
    SALARY = "salary"
    RENT = "rent"
    UTILITY = "utility"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        return _TYPE_DISPLAY[self][0]

    @property
    def icon(self) -> str:
        return _TYPE_DISPLAY[self][1]


_TYPE_DISPLAY = {
    RecurringType.SUBSCRIPTION: ("Subscription", "\U0001F504"),
    RecurringType.EMI: ("EMI", "\U0001F4B3"),
    RecurringType.SALARY: ("Salary", "\U0001F4B0"),
    RecurringType.RENT: ("Rent", "\U0001F3E0"),
    RecurringType.UTILITY: ("Utility", "⚡"),
    RecurringType.OTHER: ("Other", "\U0001F4CC"),
}


@dataclass(frozen=True)
class SpecificDay:
    """Monthly occurrences land on a fixed calendar day (clamped to month length)."""
    day: int

    def __post_init__(self):
        if not 1 <= self.day <= 31:
            raise ValueError(f"day must be between 1 and 31, got {self.day}")


@dataclass(frozen=True)
class LastDayOfMonth:
    """Monthly occurrences land on the last day of each month."""


DayOfMonthPattern = Union[SpecificDay, LastDayOfMonth]


class RecurringTransaction(BaseModel):
    """
    A detected recurring transaction pattern.

    Records are produced fresh by every detection run; ``id`` is not stable
    across runs. Persistence, deduplication and user confirmation are the
    caller's responsibility.
    """
    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    merchant_pattern: str = Field(alias="merchantPattern")
    amount: Decimal = Field(ge=0)
    frequency: RecurringFrequency
    average_interval: int = Field(alias="averageInterval", ge=0)
    last_occurrence: int = Field(alias="lastOccurrence")
    next_expected: int = Field(alias="nextExpected")
    transaction_ids: List[int] = Field(alias="transactionIds", min_length=1)
    is_user_confirmed: bool = Field(default=False, alias="isUserConfirmed")
    recurring_type: RecurringType = Field(alias="type")

    model_config = ConfigDict(
        populate_by_name=True,
        json_encoders={
            Decimal: str,
            uuid.UUID: str
        },
        use_enum_values=False  # Preserve enum objects (not strings) for type safety
    )

    @field_validator('last_occurrence', 'next_expected')
    @classmethod
    def check_positive_timestamp(cls, v: int) -> int:
        if v < 0:
            raise ValueError(TIMESTAMP_ERROR_MESSAGE)
        return v

    @model_validator(mode='after')
    def check_next_after_last(self) -> Self:
        if self.next_expected <= self.last_occurrence:
            raise ValueError(NEXT_EXPECTED_ERROR_MESSAGE)
        return self

    @property
    def next_expected_at(self) -> datetime:
        return datetime.fromtimestamp(self.next_expected / 1000, tz=timezone.utc)

    @property
    def last_occurrence_at(self) -> datetime:
        return datetime.fromtimestamp(self.last_occurrence / 1000, tz=timezone.utc)

    def monthly_equivalent_amount(self) -> Decimal:
        """Amount normalized to a per-month figure based on frequency."""
        return self.amount * MONTHLY_MULTIPLIERS[self.frequency]

    def to_dict(self) -> Dict[str, Any]:
        """JSON-compatible camelCase representation for callers that store or display patterns."""
        return self.model_dump(by_alias=True, mode="json")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Self:
        """Rebuild a pattern previously produced by ``to_dict``."""
        converted_data = data.copy()
        if 'id' in converted_data and isinstance(converted_data['id'], str):
            converted_data['id'] = uuid.UUID(converted_data['id'])
        if 'amount' in converted_data and not isinstance(converted_data['amount'], Decimal):
            converted_data['amount'] = Decimal(str(converted_data['amount']))
        return cls.model_validate(converted_data)
