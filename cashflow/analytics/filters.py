"""
Interactive filters over type, category and trailing window, and the totals built on them.
"""
from __future__ import annotations

import datetime as dt
from collections.abc import Callable, Iterable

from cashflow.config import ALL_CATEGORIES
from cashflow.data.normalize import EARLIEST_TIMESTAMP, utc_now
from cashflow.data.schemas import FilterSpec, Transaction
from cashflow.analytics.buckets import monthly_expense_between


def window_bounds(range_days: int, now: dt.datetime | None = None) -> tuple[dt.datetime, dt.datetime]:
    """[now - range_days, now], with the start clamped to the earliest storable timestamp."""
    now = now or utc_now()
    if range_days >= (now - EARLIEST_TIMESTAMP).days:
        return EARLIEST_TIMESTAMP, now
    return now - dt.timedelta(days=range_days), now


def build_predicate(spec: FilterSpec, now: dt.datetime | None = None) -> Callable[[Transaction], bool]:
    """AND of the window, type and category conditions of `spec`."""
    start, end = window_bounds(spec.range_days, now)

    def _passes(t: Transaction) -> bool:
        if not (start <= t.timestamp <= end):
            return False
        if not spec.type.matches(t.direction):
            return False
        if spec.category != ALL_CATEGORIES and t.category != spec.category:
            return False
        return True

    return _passes


def apply_filter(
    transactions: Iterable[Transaction],
    spec: FilterSpec,
    now: dt.datetime | None = None,
) -> tuple[Transaction, ...]:
    """Transactions passing `spec`, in input order. An empty result is fine."""
    passes = build_predicate(spec, now)
    return tuple(t for t in transactions if passes(t))


# ---------------------------------------------------------------------------
# Totals over a filtered sequence
# ---------------------------------------------------------------------------

def sum_income(transactions: Iterable[Transaction]) -> float:
    return float(sum(t.amount for t in transactions if t.is_income))


def sum_expense(transactions: Iterable[Transaction]) -> float:
    return float(sum(t.amount for t in transactions if t.is_expense))


def net(transactions: Iterable[Transaction]) -> float:
    transactions = tuple(transactions)
    return sum_income(transactions) - sum_expense(transactions)


def filtered_totals(transactions: Iterable[Transaction]) -> dict[str, float]:
    transactions = tuple(transactions)
    income = sum_income(transactions)
    expense = sum_expense(transactions)
    return {"income": income, "expense": expense, "net": income - expense}


def monthly_expense_filtered(
    filtered: Iterable[Transaction],
    range_days: int,
    now: dt.datetime | None = None,
) -> dict[dt.date, float]:
    """Monthly expense totals for a filtered sequence, zero-filled over every month
    touched by the trailing `range_days` window."""
    start, end = window_bounds(range_days, now)
    return monthly_expense_between(filtered, start.date(), end.date())


# ---------------------------------------------------------------------------
# Category selector
# ---------------------------------------------------------------------------

def distinct_categories(transactions: Iterable[Transaction]) -> list[str]:
    """Sorted categories with the "All" choice in front. Recomputed on every call."""
    found = {t.category for t in transactions if t.category != ALL_CATEGORIES}
    return [ALL_CATEGORIES, *sorted(found)]
