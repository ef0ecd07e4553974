"""
Balance rule and read-side aggregations.

Everything here is pure: callers fetch rows from the store and pass them in.
Money is ``Decimal`` at scale 2 throughout.
"""

from collections import defaultdict
from datetime import datetime
from decimal import Decimal

from validators import parse_month

ZERO = Decimal('0.00')
CENT = Decimal('0.01')


def balance_delta(txn_type, amount):
    """Signed change a transaction applies to its account.

    Transfers leave the balance untouched: there is no destination account
    to move funds to, so a transfer is recorded without moving money.
    """
    if txn_type == 'income':
        return amount
    if txn_type == 'expense':
        return -amount
    return ZERO


def month_bounds(month):
    """Half-open ``[start, end)`` range covering every instant of ``YYYY-MM``."""
    year, mon = parse_month(month)
    start = datetime(year, mon, 1)
    if mon == 12:
        end = datetime(year + 1, 1, 1)
    else:
        end = datetime(year, mon + 1, 1)
    return start, end


def total_balance(accounts):
    # No currency conversion: balances in different currencies are added as-is.
    return sum((Decimal(a.balance) for a in accounts), ZERO).quantize(CENT)


def _expenses(transactions):
    return (t for t in transactions if t.type == 'expense')


def monthly_expenses(transactions):
    return sum((Decimal(t.amount) for t in _expenses(transactions)), ZERO).quantize(CENT)


def category_spending(transactions):
    """Expense totals per category, sorted by category name.

    Only categories that actually have expenses appear.
    """
    totals = defaultdict(lambda: ZERO)
    for t in _expenses(transactions):
        totals[t.category] += Decimal(t.amount)
    return [(category, totals[category].quantize(CENT)) for category in sorted(totals) if totals[category] != 0]
