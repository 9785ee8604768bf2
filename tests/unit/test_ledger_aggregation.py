"""Unit tests for ledger aggregation (no database)."""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from elevate.models import ExpenseStatus, MaintenanceStatus
from elevate.services.errors import MalformedDateError
from elevate.services.ledger_service import aggregate_ledger, month_bounds


def bill(amount, status, period_date):
    return SimpleNamespace(amount=amount, status=status, period_date=period_date)


def expense(amount, status, spent_on):
    return SimpleNamespace(amount=amount, status=status, date=spent_on)


PAID = MaintenanceStatus.PAID
PENDING = MaintenanceStatus.PENDING
SUBMITTED = MaintenanceStatus.SUBMITTED
APPROVED = ExpenseStatus.APPROVED


class TestMonthBounds:
    def test_bounds_of_mid_month_date(self):
        """Test bounds of mid month date."""
        assert month_bounds(date(2024, 3, 17)) == (date(2024, 3, 1), date(2024, 4, 1))

    def test_bounds_of_december(self):
        """Test bounds of december."""
        assert month_bounds(date(2024, 12, 1)) == (date(2024, 12, 1), date(2025, 1, 1))


class TestAggregateLedger:
    """Test balance formulas and partitioning."""

    def test_summary_figures(self):
        """Test ledger summary figures."""
        bills = [
            bill(3000, PAID, date(2024, 1, 1)),
            bill(3000, PAID, date(2024, 2, 1)),
            bill(3000, PENDING, date(2024, 2, 1)),
            bill(2000, PAID, date(2024, 3, 1)),
            bill(1000, SUBMITTED, date(2024, 3, 1)),
            bill(500, PENDING, date(2024, 3, 1)),
        ]
        expenses = [
            expense(Decimal("1500"), APPROVED, date(2024, 2, 10)),
            expense(Decimal("700"), APPROVED, date(2024, 3, 5)),
        ]

        summary = aggregate_ledger(bills, expenses, date(2024, 3, 1), Decimal("10000"))

        assert summary.previous_balance == Decimal("14500")
        assert summary.collected_this_month == Decimal("2000")
        assert summary.pending_this_month == Decimal("1500")
        assert summary.expenses_this_month == Decimal("700")
        assert summary.closing_balance == Decimal("15800")

    def test_records_after_target_month_are_excluded(self):
        """Test records after target month are excluded."""
        bills = [bill(3000, PAID, date(2024, 4, 1)), bill(100, PENDING, date(2024, 5, 1))]
        expenses = [expense(Decimal("50"), APPROVED, date(2024, 4, 1))]

        summary = aggregate_ledger(bills, expenses, date(2024, 3, 1))

        assert summary.previous_balance == 0
        assert summary.collected_this_month == 0
        assert summary.pending_this_month == 0
        assert summary.expenses_this_month == 0
        assert summary.closing_balance == 0

    def test_last_day_of_month_expense_is_current(self):
        """Test last day of month expense is current."""
        expenses = [expense(Decimal("80"), APPROVED, date(2024, 3, 31))]

        summary = aggregate_ledger([], expenses, date(2024, 3, 1))

        assert summary.expenses_this_month == Decimal("80")
        assert summary.previous_balance == 0

    def test_paid_income_partition_is_complete(self):
        """All-time paid total equals prior income plus collected this month."""
        bills = [
            bill(amount, status, date(2023, month, 1))
            for month, amount, status in [
                (1, 1000, PAID),
                (2, 1100, PENDING),
                (5, 1200, PAID),
                (8, 1300, SUBMITTED),
                (9, 1400, PAID),
                (9, 1500, PAID),
                (9, 1600, PENDING),
            ]
        ]
        all_paid = sum(b.amount for b in bills if b.status == PAID)

        summary = aggregate_ledger(bills, [], date(2023, 9, 1))

        assert summary.previous_balance + summary.collected_this_month == all_paid
        assert summary.pending_this_month == 1600

    def test_pending_is_not_carried_into_balances(self):
        """Test pending is not carried into balances."""
        bills = [bill(3000, PENDING, date(2024, 1, 1)), bill(3000, SUBMITTED, date(2024, 1, 1))]

        summary = aggregate_ledger(bills, [], date(2024, 2, 1))

        assert summary.previous_balance == 0
        assert summary.pending_this_month == 0

    def test_only_approved_expenses_count(self):
        """Test only approved expenses count."""
        expenses = [
            expense(Decimal("100"), ExpenseStatus.PENDING, date(2024, 3, 2)),
            expense(Decimal("200"), ExpenseStatus.REJECTED, date(2024, 3, 2)),
            expense(Decimal("300"), ExpenseStatus.REJECTED, date(2024, 1, 2)),
        ]

        summary = aggregate_ledger([], expenses, date(2024, 3, 1))

        assert summary.expenses_this_month == 0
        assert summary.previous_balance == 0

    def test_non_numeric_amounts_count_as_zero(self):
        """Test non numeric amounts count as zero."""
        bills = [bill(None, PAID, date(2024, 1, 1)), bill("n/a", PAID, date(2024, 3, 1)), bill("250", PAID, date(2024, 3, 1))]
        expenses = [expense("", APPROVED, date(2024, 1, 5))]

        summary = aggregate_ledger(bills, expenses, date(2024, 3, 1))

        assert summary.previous_balance == 0
        assert summary.collected_this_month == Decimal("250")

    def test_raw_string_statuses(self):
        """Test raw string statuses."""
        bills = [bill(400, "Paid", date(2024, 3, 1)), bill(100, "Pending", date(2024, 3, 1))]
        expenses = [expense(Decimal("50"), "Approved", date(2024, 3, 3))]

        summary = aggregate_ledger(bills, expenses, date(2024, 3, 1))

        assert summary.collected_this_month == 400
        assert summary.pending_this_month == 100
        assert summary.closing_balance == Decimal("350")

    @pytest.mark.parametrize("opening, expected", [(None, Decimal("0")), ("1000.50", Decimal("1000.50")), ("junk", Decimal("0"))])
    def test_opening_balance_coercion(self, opening, expected):
        """Test opening balance coercion."""
        summary = aggregate_ledger([], [], date(2024, 3, 1), opening)

        assert summary.previous_balance == expected
        assert summary.closing_balance == expected

    def test_bad_target_month_raises(self):
        """Test bad target month raises."""
        with pytest.raises(MalformedDateError):
            aggregate_ledger([], [], "March")
