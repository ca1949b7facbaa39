"""
Transaction input model.

Transactions are owned by the external transaction store (populated from
parsed bank SMS messages). The recurring detection engine only reads them.
"""

import logging
from datetime import datetime, timezone, tzinfo
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

TIMESTAMP_ERROR_MESSAGE = "Timestamp must be a positive integer representing milliseconds since epoch"


class TransactionDirection(str, Enum):
    """Direction of money movement for a parsed transaction."""
    DEBIT = "debit"
    CREDIT = "credit"
    UNKNOWN = "unknown"  # Parser could not tell


class Transaction(BaseModel):
    """
    A single parsed transaction, as supplied by the transaction store.

    Only the fields the recurring engine needs are modelled here.
    """
    transaction_id: int = Field(alias="transactionId")
    amount: Decimal
    direction: TransactionDirection
    merchant: Optional[str] = None
    date: int  # milliseconds since epoch

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        json_encoders={
            Decimal: str
        },
        use_enum_values=False  # Preserve enum objects (not strings) for type safety
    )

    @field_validator('amount', mode='before')
    @classmethod
    def ensure_amount_is_decimal(cls, v: Any) -> Decimal:
        if not isinstance(v, Decimal):
            try:
                return Decimal(str(v))
            except Exception as e:
                raise ValueError(f"Invalid amount value: {v}. Could not convert to Decimal.") from e
        return v

    @field_validator('date')
    @classmethod
    def check_positive_timestamp(cls, v: int) -> int:
        if v < 0:
            raise ValueError(TIMESTAMP_ERROR_MESSAGE)
        return v

    @property
    def has_merchant(self) -> bool:
        """True when the merchant string is usable for grouping."""
        return self.merchant is not None and bool(self.merchant.strip())

    def occurred_at(self, tz: tzinfo = timezone.utc) -> datetime:
        """Transaction timestamp as an aware datetime in the given zone."""
        return datetime.fromtimestamp(self.date / 1000, tz=tz)
