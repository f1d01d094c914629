"""
Dashboard analytics — page payloads for Home, Analysis and Transaction History.

Each function reads the current snapshot from the DataStore and returns a
JSON-ready dict; all number crunching is delegated to the aggregators.
"""
from __future__ import annotations

import datetime as dt
from collections.abc import Iterable, Mapping

from cashflow.config import MONTH_WINDOW, RECENT_COUNT
from cashflow.data.normalize import utc_now
from cashflow.data.schemas import AxisScale, FilterSpec, FilterType, Transaction
from cashflow.data.store import DataStore
from cashflow.analytics.axis import axis_scale
from cashflow.analytics.buckets import daily_cashflow, monthly_expense_window, yearly_expense_sums
from cashflow.analytics.categories import category_shares, category_totals
from cashflow.analytics.common import sanitize_for_json
from cashflow.analytics.filters import (
    apply_filter,
    distinct_categories,
    filtered_totals,
    monthly_expense_filtered,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def format_amount(amount: float) -> str:
    return f"{amount:,.2f}"


def _axis(scale: AxisScale) -> dict:
    return {"step": scale.step, "max": scale.nice_max, "ticks": scale.ticks()}


def _monthly_rows(monthly: Mapping[dt.date, float]) -> list[dict]:
    return [
        {"month": f"{m:%Y-%m}", "label": f"{m:%b %Y}", "expense": v}
        for m, v in monthly.items()
    ]


def _category_rows(totals: Mapping[str, float]) -> list[dict]:
    shares = category_shares(totals)
    return [
        {"category": cat, "total": v, "share_pct": round(shares[cat], 1)}
        for cat, v in totals.items()
    ]


def recent_transactions(transactions: Iterable[Transaction], count: int = RECENT_COUNT) -> list[Transaction]:
    """Newest first; equal timestamps keep input order."""
    ordered = sorted(transactions, key=lambda t: t.timestamp, reverse=True)
    return ordered[:max(count, 0)]


# ---------------------------------------------------------------------------
# Home
# ---------------------------------------------------------------------------

def home_summary(store: DataStore, recent: int = RECENT_COUNT) -> dict:
    """Balance card and the latest transactions."""
    txs = store.transactions
    totals = filtered_totals(txs)
    return sanitize_for_json({
        "income": totals["income"],
        "expense": totals["expense"],
        "balance": totals["net"],
        "recent": recent_transactions(txs, recent),
    })


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------

def analysis(store: DataStore, spec: FilterSpec | None = None, now: dt.datetime | None = None) -> dict:
    """Every series the analysis page charts, plus the filtered insight block."""
    spec = spec or FilterSpec()
    now = now or utc_now()
    txs = store.transactions

    daily = daily_cashflow(txs)
    categories = category_totals(txs)
    monthly = monthly_expense_window(txs, MONTH_WINDOW, now)
    yearly = yearly_expense_sums(txs)

    filtered = apply_filter(txs, spec, now)
    f_monthly = monthly_expense_filtered(filtered, spec.range_days, now)
    f_categories = category_totals(filtered)

    daily_values = [v for d in daily.values() for v in (d["income"], d["expense"])]

    return sanitize_for_json({
        "filter": {
            "type": spec.type.value,
            "category": spec.category,
            "range_days": spec.range_days,
            "label": spec.label,
        },
        "categories": distinct_categories(txs),
        "daily_cashflow": {
            "days": [{"day": d, **vals} for d, vals in daily.items()],
            "axis": _axis(axis_scale(daily_values)),
        },
        "category_spending": _category_rows(categories),
        "monthly_trend": {
            "months": _monthly_rows(monthly),
            "axis": _axis(axis_scale(monthly.values())),
        },
        "yearly_trend": {
            "years": [{"year": y, "expense": v} for y, v in yearly.items()],
            "axis": _axis(axis_scale(yearly.values())),
        },
        "filtered": {
            "count": len(filtered),
            "totals": filtered_totals(filtered),
            "monthly": _monthly_rows(f_monthly),
            "monthly_axis": _axis(axis_scale(f_monthly.values())),
            "categories": _category_rows(f_categories),
        },
    })


# ---------------------------------------------------------------------------
# Transaction history
# ---------------------------------------------------------------------------

def search_transactions(
    transactions: Iterable[Transaction],
    query: str = "",
    type: FilterType = FilterType.ALL,
) -> list[Transaction]:
    """Direction filter, then a case-insensitive match on title, category,
    payment method or the formatted amount."""
    q = (query or "").strip().lower()
    matches = []
    for t in transactions:
        if not type.matches(t.direction):
            continue
        if q and not (
            q in t.title.lower()
            or q in t.category.lower()
            or q in t.payment_method.lower()
            or q in format_amount(t.amount).lower()
        ):
            continue
        matches.append(t)
    return matches


def transaction_history(
    store: DataStore,
    query: str = "",
    type: FilterType = FilterType.ALL,
    strict: bool = True,
) -> dict:
    """History list, newest first. Strict mode leaves out records that could not be rebuilt."""
    txs = store.history_transactions if strict else store.transactions
    found = search_transactions(recent_transactions(txs, len(txs)), query, type)
    return sanitize_for_json({
        "query": query,
        "type": type.value,
        "strict": strict,
        "count": len(found),
        "dropped": store.dropped if strict else 0,
        "transactions": found,
    })
