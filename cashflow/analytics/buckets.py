"""
Time-bucket aggregation — daily, monthly and yearly sums for the trend charts.

Every mapping returned here is in ascending key order; chart x-axes assume it.
"""
from __future__ import annotations

import datetime as dt
from collections.abc import Iterable

import pandas as pd

from cashflow.config import MONTH_WINDOW
from cashflow.data.normalize import utc_now
from cashflow.data.schemas import Direction, Transaction
from cashflow.analytics.common import month_start, of_direction, to_frame


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _month_sums(df: pd.DataFrame) -> pd.Series:
    """Expense totals per calendar month (PeriodIndex, ascending, no gaps filled)."""
    expenses = of_direction(df, Direction.EXPENSE)
    if expenses.empty:
        return pd.Series(dtype="float64", index=pd.PeriodIndex([], freq="M"))
    return expenses.groupby("month")["amount"].sum().sort_index()


def _period_dict(sums: pd.Series) -> dict[dt.date, float]:
    return {p.to_timestamp().date(): float(v) for p, v in sums.items()}


def month_range(start: dt.date, end: dt.date) -> pd.PeriodIndex:
    """Every calendar month from start's month through end's month, inclusive."""
    if start > end:
        return pd.PeriodIndex([], freq="M")
    return pd.period_range(start=pd.Timestamp(month_start(start)), end=pd.Timestamp(month_start(end)), freq="M")


# ---------------------------------------------------------------------------
# Daily
# ---------------------------------------------------------------------------

def daily_sums(transactions: Iterable[Transaction], direction: Direction) -> dict[dt.date, float]:
    """Total amount per calendar day for one direction, ascending by day."""
    df = of_direction(to_frame(transactions), direction)
    if df.empty:
        return {}
    sums = df.groupby("day")["amount"].sum().sort_index()
    return {ts.date(): float(v) for ts, v in sums.items()}


def daily_cashflow(transactions: Iterable[Transaction]) -> dict[dt.date, dict[str, float]]:
    """Income and expense per day over the union of days with either, zero-filled."""
    df = to_frame(transactions)
    if df.empty:
        return {}
    table = (
        df.pivot_table(index="day", columns="direction", values="amount", aggfunc="sum", fill_value=0.0)
        .reindex(columns=[Direction.INCOME.value, Direction.EXPENSE.value], fill_value=0.0)
        .sort_index()
    )
    return {
        ts.date(): {
            "income": float(row[Direction.INCOME.value]),
            "expense": float(row[Direction.EXPENSE.value]),
        }
        for ts, row in table.iterrows()
    }


# ---------------------------------------------------------------------------
# Monthly
# ---------------------------------------------------------------------------

def monthly_expense_window(
    transactions: Iterable[Transaction],
    month_count: int = MONTH_WINDOW,
    now: dt.datetime | None = None,
) -> dict[dt.date, float]:
    """Expense totals for the `month_count` months ending with the current month.

    Keys are first-of-month dates; months without expenses are present with 0.0.
    """
    if month_count < 1:
        return {}
    now = now or utc_now()
    end = pd.Period(now, freq="M")
    window = pd.period_range(end=end, periods=month_count, freq="M")
    sums = _month_sums(to_frame(transactions)).reindex(window, fill_value=0.0)
    return _period_dict(sums)


def monthly_expense_between(
    transactions: Iterable[Transaction],
    start: dt.date,
    end: dt.date,
) -> dict[dt.date, float]:
    """Expense totals per month: every month in [start, end] zero-filled, plus any
    other month that has expenses in the given transactions."""
    sums = _month_sums(to_frame(transactions))
    index = sums.index.union(month_range(start, end)).sort_values()
    return _period_dict(sums.reindex(index, fill_value=0.0))


# ---------------------------------------------------------------------------
# Yearly
# ---------------------------------------------------------------------------

def yearly_expense_sums(transactions: Iterable[Transaction]) -> dict[int, float]:
    """Expense totals per year, only for years that have expenses."""
    expenses = of_direction(to_frame(transactions), Direction.EXPENSE)
    if expenses.empty:
        return {}
    sums = expenses.groupby("year")["amount"].sum().sort_index()
    return {int(y): float(v) for y, v in sums.items()}
