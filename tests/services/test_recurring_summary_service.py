"""
Unit tests for RecurringSummaryService.
"""

from decimal import Decimal

import pytest

from models.recurring_transaction import MONTHLY_MULTIPLIERS, RecurringFrequency, RecurringType
from services.recurring_transactions.summary_service import (
    RecurringSummaryService,
    monthly_equivalent,
)
from tests.fixtures.recurring_transaction_fixtures import DAY_MS, create_recurring, ms

NOW = ms(2024, 6, 1)


@pytest.fixture
def service():
    return RecurringSummaryService()


@pytest.fixture
def records():
    """A small portfolio of detected patterns around NOW."""
    return [
        create_recurring("NETFLIX", "499", next_expected=NOW + 3 * DAY_MS, is_user_confirmed=True),
        create_recurring(
            "GYM", "300", RecurringFrequency.WEEKLY, next_expected=NOW + 1 * DAY_MS
        ),
        create_recurring(
            "HDFC BANK", "25000", next_expected=NOW + 10 * DAY_MS,
            recurring_type=RecurringType.EMI, is_user_confirmed=True
        ),
        create_recurring(
            "LIC", "12000", RecurringFrequency.ANNUAL, next_expected=NOW - 2 * DAY_MS,
            recurring_type=RecurringType.OTHER
        ),
        create_recurring(
            "ACME CORP PAYROLL", "50000", next_expected=NOW + 7 * DAY_MS,
            recurring_type=RecurringType.SALARY
        ),
    ]


class TestMonthlyEquivalent:
    """Per-month conversion by frequency."""

    @pytest.mark.parametrize("frequency,amount,expected", [
        (RecurringFrequency.WEEKLY, "100", Decimal("433")),
        (RecurringFrequency.BI_WEEKLY, "100", Decimal("217")),
        (RecurringFrequency.MONTHLY, "499", Decimal("499")),
        (RecurringFrequency.QUARTERLY, "300", Decimal("100")),
        (RecurringFrequency.ANNUAL, "1200", Decimal("100")),
    ])
    def test_monthly_equivalent(self, frequency, amount, expected):
        recurring = create_recurring(amount=amount, frequency=frequency)
        assert monthly_equivalent(recurring) == pytest.approx(expected)

    def test_every_frequency_has_multiplier(self):
        assert set(MONTHLY_MULTIPLIERS) == set(RecurringFrequency)


class TestRecurringSummaryService:
    """Queries and aggregation over detected patterns."""

    def test_calculate_monthly_total(self, service, records):
        expected = Decimal("499") + Decimal("300") * Decimal("4.33") + Decimal("25000") \
            + Decimal("12000") / Decimal("12") + Decimal("50000")
        assert service.calculate_monthly_total(records) == pytest.approx(expected)

    def test_calculate_monthly_total_confirmed_only(self, service, records):
        assert service.calculate_monthly_total(records, confirmed_only=True) == Decimal("25499")

    def test_calculate_monthly_total_empty(self, service):
        assert service.calculate_monthly_total([]) == Decimal("0")

    def test_filters(self, service, records):
        assert [r.merchant_pattern for r in service.by_frequency(records, RecurringFrequency.WEEKLY)] == ["GYM"]
        assert [r.merchant_pattern for r in service.by_type(records, RecurringType.EMI)] == ["HDFC BANK"]
        assert len(service.confirmed(records)) == 2
        assert len(service.unconfirmed(records)) == 3

    def test_by_merchant_pattern_normalizes_query(self, service, records):
        matches = service.by_merchant_pattern(records, "HDFC Bank Ltd.")
        assert [r.merchant_pattern for r in matches] == ["HDFC BANK"]

    def test_upcoming_sorted_and_excludes_past(self, service, records):
        upcoming = service.upcoming(records, now_ms=NOW)
        assert [r.merchant_pattern for r in upcoming] == ["GYM", "NETFLIX", "ACME CORP PAYROLL", "HDFC BANK"]

    def test_in_window_is_inclusive(self, service, records):
        window = service.in_window(records, NOW, NOW + 7 * DAY_MS)
        assert [r.merchant_pattern for r in window] == ["GYM", "NETFLIX", "ACME CORP PAYROLL"]

    def test_in_window_rejects_inverted_range(self, service, records):
        with pytest.raises(ValueError):
            service.in_window(records, NOW, NOW - 1)

    def test_next_upcoming(self, service, records):
        assert service.next_upcoming(records, now_ms=NOW).merchant_pattern == "GYM"
        assert service.next_upcoming(records, now_ms=NOW + 100 * DAY_MS) is None

    def test_summarize(self, service, records):
        summary = service.summarize(records, now_ms=NOW)

        assert summary.confirmed_count == 2
        assert summary.upcoming_count == 3
        assert summary.count_by_type[RecurringType.SUBSCRIPTION] == 2
        assert summary.count_by_type[RecurringType.EMI] == 1
        assert summary.count_by_type[RecurringType.SALARY] == 1
        assert summary.count_by_type[RecurringType.RENT] == 0
        assert summary.total_monthly_recurring == service.calculate_monthly_total(records)

    def test_summarize_serializes_with_aliases(self, service, records):
        data = service.summarize(records, now_ms=NOW).model_dump(by_alias=True, mode="json")
        assert set(data) == {"totalMonthlyRecurring", "confirmedCount", "upcomingCount", "countByType"}
        assert data["countByType"]["emi"] == 1

    def test_summarize_empty(self, service):
        summary = service.summarize([], now_ms=NOW)
        assert summary.total_monthly_recurring == Decimal("0")
        assert summary.upcoming_count == 0
        assert all(count == 0 for count in summary.count_by_type.values())
