"""
Test suite for the balance rule and aggregation functions.
These run on plain objects; no database or app context is needed.
"""

import pytest
import os
import sys
from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace

# Ensure the project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import ledger  # noqa: E402
from errors import ValidationError  # noqa: E402


def txn(type, amount, category='food'):
    return SimpleNamespace(type=type, amount=Decimal(amount), category=category)


def acct(balance):
    return SimpleNamespace(balance=Decimal(balance))


JANUARY = [
    txn('expense', '20.00', 'food'),
    txn('expense', '15.00', 'food'),
    txn('expense', '30.00', 'transport'),
    txn('income', '500.00', 'salary'),
]


class TestBalanceRule:
    """Test the signed change a posting applies to its account."""

    def test_income_adds(self):
        assert ledger.balance_delta('income', Decimal('25.50')) == Decimal('25.50')

    def test_expense_subtracts(self):
        assert ledger.balance_delta('expense', Decimal('25.50')) == Decimal('-25.50')

    def test_expense_can_go_negative(self):
        assert Decimal('10.00') + ledger.balance_delta('expense', Decimal('25.00')) == Decimal('-15.00')

    def test_transfer_leaves_balance(self):
        assert ledger.balance_delta('transfer', Decimal('40.00')) == 0

    def test_no_drift_over_many_cents(self):
        """Adding a cent a thousand times lands exactly on 10.00."""
        balance = Decimal('0.00')
        for _ in range(1000):
            balance += ledger.balance_delta('income', Decimal('0.01'))
        assert balance == Decimal('10.00')


class TestTotalBalance:

    def test_sums_balances(self):
        assert ledger.total_balance([acct('100.00'), acct('250.50')]) == Decimal('350.50')

    def test_empty(self):
        assert ledger.total_balance([]) == Decimal('0.00')

    def test_negative_credit_balance_reduces_total(self):
        assert ledger.total_balance([acct('100.00'), acct('-40.25')]) == Decimal('59.75')


class TestMonthlyExpenses:

    def test_empty_is_zero(self):
        assert ledger.monthly_expenses([]) == 0

    def test_income_excluded(self):
        assert ledger.monthly_expenses(JANUARY) == Decimal('65.00')

    def test_transfers_excluded(self):
        assert ledger.monthly_expenses([txn('transfer', '80.00'), txn('expense', '5.00')]) == Decimal('5.00')


class TestCategorySpending:

    def test_groups_expenses(self):
        assert ledger.category_spending(JANUARY) == [
            ('food', Decimal('35.00')),
            ('transport', Decimal('30.00')),
        ]

    def test_sorted_by_category(self):
        rows = ledger.category_spending([
            txn('expense', '1.00', 'travel'),
            txn('expense', '1.00', 'bills'),
            txn('expense', '1.00', 'gas'),
        ])
        assert [c for c, _ in rows] == ['bills', 'gas', 'travel']

    def test_income_only_categories_omitted(self):
        rows = ledger.category_spending([txn('income', '500.00', 'salary')])
        assert rows == []

    def test_no_zero_rows(self):
        rows = ledger.category_spending(JANUARY + [txn('income', '10.00', 'health')])
        assert all(amount > 0 for _, amount in rows)
        assert 'health' not in dict(rows)


class TestMonthBounds:

    def test_regular_month(self):
        assert ledger.month_bounds('2024-01') == (datetime(2024, 1, 1), datetime(2024, 2, 1))

    def test_december_rolls_year(self):
        assert ledger.month_bounds('2023-12') == (datetime(2023, 12, 1), datetime(2024, 1, 1))

    def test_leap_february(self):
        start, end = ledger.month_bounds('2024-02')
        assert (end - start).days == 29

    def test_short_month(self):
        start, end = ledger.month_bounds('2023-04')
        assert (end - start).days == 30

    @pytest.mark.parametrize("month", ["2024-13", "2024-1", "24-01", "january", "", None, "2024-00", "2024-01\n", " 2024-01"])
    def test_invalid_month_rejected(self, month):
        with pytest.raises(ValidationError):
            ledger.month_bounds(month)
