"""Group-by helpers shared by every analytics operation"""

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional

from finsight.domain.models import MonthlyTotals, Transaction
from finsight.utils.date_utils import month_key


def total_income(transactions: Iterable[Transaction]) -> float:
    return sum(t.amount for t in transactions if t.is_income)


def total_expenses(transactions: Iterable[Transaction]) -> float:
    return sum(t.amount for t in transactions if t.is_expense)


def aggregate_by_category(transactions: Iterable[Transaction]) -> Dict[str, float]:
    """
    Sum expense amounts per category.

    Category strings are used verbatim as keys: "Food" and "food " are two
    different categories. Income and transfer transactions are ignored.
    """
    totals: Dict[str, float] = {}
    for txn in transactions:
        if txn.is_expense:
            totals[txn.category] = totals.get(txn.category, 0.0) + txn.amount
    return totals


def aggregate_by_month(transactions: Iterable[Transaction]) -> Dict[str, MonthlyTotals]:
    """
    Income and expense totals per YYYY-MM, sorted by month.

    Every transaction registers its month, so a month holding only transfers
    shows up with zero totals.
    """
    months: Dict[str, MonthlyTotals] = defaultdict(MonthlyTotals)
    for txn in transactions:
        bucket = months[month_key(txn.date)]
        if txn.is_income:
            bucket.income += txn.amount
        elif txn.is_expense:
            bucket.expenses += txn.amount
    return dict(sorted(months.items()))


def category_average(transactions: Iterable[Transaction]) -> Dict[str, float]:
    """Average amount per expense transaction, per category"""
    totals: Dict[str, float] = defaultdict(float)
    counts: Dict[str, int] = defaultdict(int)
    for txn in transactions:
        if txn.is_expense:
            totals[txn.category] += txn.amount
            counts[txn.category] += 1
    return {category: totals[category] / counts[category] for category in totals}


def monthly_category_average(transactions: Iterable[Transaction]) -> Dict[str, float]:
    """
    Average monthly expense per category.

    The denominator is the number of distinct months in the whole set, not the
    months in which the category itself appears (minimum 1).
    """
    transactions = list(transactions)
    month_count = len(aggregate_by_month(transactions)) or 1
    return {
        category: total / month_count
        for category, total in aggregate_by_category(transactions).items()
    }


def monthly_expense_totals(transactions: Iterable[Transaction]) -> List[float]:
    """Expense total of each month present, oldest first"""
    return [totals.expenses for totals in aggregate_by_month(transactions).values()]


def filter_by_date(
    transactions: Iterable[Transaction],
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> List[Transaction]:
    """Keep transactions dated within [start, end]; either bound may be open"""
    return [
        t for t in transactions
        if (start is None or t.date >= start) and (end is None or t.date <= end)
    ]
