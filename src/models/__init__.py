"""
Models package for the recurring transaction detection engine.
"""

from .transaction import (
    Transaction,
    TransactionDirection,
)

from .recurring_transaction import (
    RecurringTransaction,
    RecurringFrequency,
    MONTHLY_MULTIPLIERS,
    RecurringType,
    DayOfMonthPattern,
    SpecificDay,
    LastDayOfMonth,
)

__all__ = [
    'Transaction',
    'TransactionDirection',
    'RecurringTransaction',
    'RecurringFrequency',
    'MONTHLY_MULTIPLIERS',
    'RecurringType',
    'DayOfMonthPattern',
    'SpecificDay',
    'LastDayOfMonth',
]
