"""
Category aggregation — where the money goes.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping

from cashflow.data.schemas import Direction, Transaction
from cashflow.analytics.common import of_direction, pct_of_total, to_frame


def category_totals(transactions: Iterable[Transaction]) -> dict[str, float]:
    """Expense totals per category, largest first.

    Equal totals keep the order in which their categories first appeared.
    """
    expenses = of_direction(to_frame(transactions), Direction.EXPENSE)
    if expenses.empty:
        return {}
    sums = (
        expenses.groupby("category", sort=False)["amount"].sum()
        .sort_values(ascending=False, kind="stable")
    )
    return {str(cat): float(v) for cat, v in sums.items()}


def category_shares(totals: Mapping[str, float]) -> dict[str, float]:
    """Percentage of the grand total per category, in the same order as `totals`."""
    grand_total = sum(totals.values())
    return {cat: pct_of_total(v, grand_total) for cat, v in totals.items()}
