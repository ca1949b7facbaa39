"""
Unit tests for recurring transaction models.

Tests cover:
- RecurringFrequency and RecurringType enums (values, display metadata)
- SpecificDay / LastDayOfMonth day-of-month patterns
- RecurringTransaction validation and serialization
"""

import inspect
import uuid
from decimal import Decimal

import pytest
from pydantic import ValidationError

from models import recurring_transaction as recurring_module
from models.recurring_transaction import (
    MONTHLY_MULTIPLIERS,
    LastDayOfMonth,
    RecurringFrequency,
    RecurringTransaction,
    RecurringType,
    SpecificDay,
)
from tests.fixtures.recurring_transaction_fixtures import DAY_MS, create_recurring, ms


class TestRecurringFrequency:
    """Test cases for RecurringFrequency enum."""

    def test_enum_values(self):
        assert RecurringFrequency.WEEKLY.value == "weekly"
        assert RecurringFrequency.BI_WEEKLY.value == "bi_weekly"
        assert RecurringFrequency.MONTHLY.value == "monthly"
        assert RecurringFrequency.QUARTERLY.value == "quarterly"
        assert RecurringFrequency.ANNUAL.value == "annual"
        assert len(RecurringFrequency) == 5

    def test_display_names(self):
        assert RecurringFrequency.WEEKLY.display_name == "Weekly"
        assert RecurringFrequency.BI_WEEKLY.display_name == "Bi-weekly"
        assert RecurringFrequency.ANNUAL.display_name == "Annual"

    def test_enum_from_string(self):
        freq = RecurringFrequency("monthly")
        assert freq == RecurringFrequency.MONTHLY
        assert isinstance(freq, RecurringFrequency)


class TestRecurringType:
    """Test cases for RecurringType enum."""

    def test_enum_values(self):
        assert {t.value for t in RecurringType} == {
            "subscription", "emi", "salary", "rent", "utility", "other"
        }

    def test_display_metadata(self):
        assert RecurringType.EMI.display_name == "EMI"
        assert RecurringType.SALARY.display_name == "Salary"
        for recurring_type in RecurringType:
            assert recurring_type.icon


class TestDayOfMonthPattern:
    """Test cases for the day-of-month pattern variants."""

    def test_specific_day_equality(self):
        assert SpecificDay(15) == SpecificDay(15)
        assert SpecificDay(15) != SpecificDay(16)

    @pytest.mark.parametrize("day", [0, 32, -1])
    def test_specific_day_rejects_invalid_day(self, day):
        with pytest.raises(ValueError):
            SpecificDay(day)

    def test_last_day_of_month_is_distinct_from_specific_day(self):
        assert LastDayOfMonth() == LastDayOfMonth()
        assert LastDayOfMonth() != SpecificDay(31)


class TestRecurringTransaction:
    """Test cases for RecurringTransaction model."""

    def test_create_with_aliases(self):
        recurring = create_recurring()

        assert isinstance(recurring.id, uuid.UUID)
        assert recurring.merchant_pattern == "NETFLIX"
        assert recurring.amount == Decimal("499")
        assert recurring.frequency == RecurringFrequency.MONTHLY
        assert recurring.recurring_type == RecurringType.SUBSCRIPTION
        assert recurring.is_user_confirmed is False
        assert recurring.transaction_ids == [1, 2, 3]

    def test_ids_are_unique(self):
        assert create_recurring().id != create_recurring().id

    def test_enum_preservation(self):
        recurring = create_recurring()
        assert isinstance(recurring.frequency, RecurringFrequency)
        assert isinstance(recurring.recurring_type, RecurringType)

    def test_next_expected_must_follow_last_occurrence(self):
        last = ms(2024, 3, 15)
        with pytest.raises(ValidationError):
            create_recurring(last_occurrence=last, next_expected=last)

    def test_negative_timestamp_rejected(self):
        with pytest.raises(ValidationError):
            RecurringTransaction(
                merchantPattern="NETFLIX",
                amount=Decimal("499"),
                frequency=RecurringFrequency.MONTHLY,
                averageInterval=30,
                lastOccurrence=-1,
                nextExpected=DAY_MS,
                transactionIds=[1, 2, 3],
                type=RecurringType.SUBSCRIPTION
            )

    def test_empty_transaction_ids_rejected(self):
        with pytest.raises(ValidationError):
            RecurringTransaction(
                merchantPattern="NETFLIX",
                amount=Decimal("499"),
                frequency=RecurringFrequency.MONTHLY,
                averageInterval=30,
                lastOccurrence=ms(2024, 1, 1),
                nextExpected=ms(2024, 2, 1),
                transactionIds=[],
                type=RecurringType.SUBSCRIPTION
            )

    def test_datetime_accessors(self):
        recurring = create_recurring(last_occurrence=ms(2024, 3, 15), next_expected=ms(2024, 4, 15))
        assert recurring.last_occurrence_at.day == 15
        assert recurring.next_expected_at.month == 4

    def test_to_dict_uses_aliases(self):
        recurring = create_recurring()
        data = recurring.to_dict()

        assert data["merchantPattern"] == "NETFLIX"
        assert data["frequency"] == "monthly"
        assert data["type"] == "subscription"
        assert data["isUserConfirmed"] is False
        assert data["transactionIds"] == [1, 2, 3]
        assert data["id"] == str(recurring.id)

    def test_from_dict_restores_pattern(self):
        recurring = create_recurring(amount="14.99")
        restored = RecurringTransaction.from_dict(recurring.to_dict())

        assert restored.id == recurring.id
        assert restored.amount == Decimal("14.99")
        assert restored.frequency == RecurringFrequency.MONTHLY
        assert restored.next_expected == recurring.next_expected

    def test_monthly_equivalent_amount(self):
        weekly = create_recurring(amount="100", frequency=RecurringFrequency.WEEKLY)
        assert weekly.monthly_equivalent_amount() == Decimal("433.00")

    @pytest.mark.parametrize("frequency,expected", [
        (RecurringFrequency.BI_WEEKLY, 217.0),
        (RecurringFrequency.MONTHLY, 100.0),
        (RecurringFrequency.QUARTERLY, 33.3333),
        (RecurringFrequency.ANNUAL, 8.3333),
    ])
    def test_monthly_equivalent_amount_by_frequency(self, frequency, expected):
        recurring = create_recurring(amount="100", frequency=frequency)
        assert float(recurring.monthly_equivalent_amount()) == pytest.approx(expected, rel=1e-4)

    def test_monthly_multipliers_live_with_the_model(self):
        assert set(MONTHLY_MULTIPLIERS) == set(RecurringFrequency)
        assert "services" not in inspect.getsource(recurring_module)
