import datetime as dt

import pytest

from cashflow.analytics.categories import category_shares, category_totals
from cashflow.analytics.filters import (
    apply_filter,
    distinct_categories,
    filtered_totals,
    monthly_expense_filtered,
    net,
    sum_expense,
    sum_income,
    window_bounds,
)
from cashflow.data.normalize import EARLIEST_TIMESTAMP, normalize_records
from cashflow.data.schemas import Direction, FilterSpec, FilterType

from conftest import NOW


@pytest.fixture
def scenario():
    raws = [
        {"amount": "1,200.50", "payment_type": "Credit", "created_at": "2024-03-05"},
        {"amount": 300, "payment_type": "debit", "category": "Food", "created_at": "2024-03-05"},
    ]
    return normalize_records(raws, now=NOW).transactions


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

def test_category_totals_scenario(scenario):
    assert category_totals(scenario) == {"Food": 300.0}


def test_category_totals_descending_with_stable_ties(make_tx):
    txs = [
        make_tx(5, category="B"),
        make_tx(20, category="A"),
        make_tx(5, category="C"),
        make_tx(3, category="B"),
        make_tx(100, direction=Direction.INCOME, category="Salary"),
    ]
    totals = category_totals(txs)
    assert list(totals.items()) == [("A", 20.0), ("B", 8.0), ("C", 5.0)]


def test_category_ties_keep_first_seen_order(make_tx):
    txs = [make_tx(5, category="Zed"), make_tx(5, category="Alpha")]
    assert list(category_totals(txs)) == ["Zed", "Alpha"]


def test_category_totals_partition_total_expense(raw_records):
    txs = normalize_records(raw_records, now=NOW).transactions
    assert sum(category_totals(txs).values()) == pytest.approx(sum_expense(txs))


def test_category_shares():
    shares = category_shares({"A": 75.0, "B": 25.0})
    assert shares == {"A": 75.0, "B": 25.0}
    assert category_shares({"A": 0.0}) == {"A": 0.0}
    assert category_shares({}) == {}


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------

def test_net_over_window_scenario(scenario):
    filtered = apply_filter(scenario, FilterSpec(), now=NOW)
    assert len(filtered) == 2
    assert sum_income(filtered) == pytest.approx(1200.50)
    assert sum_expense(filtered) == pytest.approx(300.0)
    assert net(filtered) == pytest.approx(900.50)
    assert filtered_totals(filtered) == pytest.approx({"income": 1200.50, "expense": 300.0, "net": 900.50})


def test_window_bounds_are_inclusive(make_tx):
    start = NOW - dt.timedelta(days=7)
    txs = [
        make_tx(1, when=start),
        make_tx(2, when=NOW),
        make_tx(3, when=start - dt.timedelta(seconds=1)),
        make_tx(4, when=NOW + dt.timedelta(seconds=1)),
    ]
    kept = apply_filter(txs, FilterSpec(range_days=7), now=NOW)
    assert [t.amount for t in kept] == [1.0, 2.0]


def test_filters_compose_with_and(make_tx):
    txs = [
        make_tx(1, category="Food"),
        make_tx(2, category="food"),
        make_tx(3, category="Food", direction=Direction.INCOME),
        make_tx(4, category="Rent"),
    ]
    spec = FilterSpec(type=FilterType.EXPENSE, category="Food")
    assert [t.amount for t in apply_filter(txs, spec, now=NOW)] == [1.0]

    spec = FilterSpec(type=FilterType.INCOME)
    assert [t.amount for t in apply_filter(txs, spec, now=NOW)] == [3.0]

    spec = FilterSpec(category="Nothing")
    assert apply_filter(txs, spec, now=NOW) == ()


def test_filter_is_idempotent(raw_records):
    txs = normalize_records(raw_records, now=NOW).transactions
    for spec in (FilterSpec(), FilterSpec(FilterType.EXPENSE, "Food", 90), FilterSpec(range_days=365)):
        once = apply_filter(txs, spec, now=NOW)
        assert apply_filter(once, spec, now=NOW) == once


def test_filter_spec_rejects_non_positive_range():
    with pytest.raises(ValueError):
        FilterSpec(range_days=0)


def test_very_long_range_clamps_to_earliest_timestamp(make_tx):
    assert window_bounds(1_000_000, now=NOW) == (EARLIEST_TIMESTAMP, NOW)
    assert window_bounds(10**12, now=NOW) == (EARLIEST_TIMESTAMP, NOW)
    txs = [make_tx(1, when="1900-01-01"), make_tx(2)]
    kept = apply_filter(txs, FilterSpec(range_days=1_000_000), now=NOW)
    assert [t.amount for t in kept] == [1.0, 2.0]
    monthly = monthly_expense_filtered(kept, 1_000_000, now=NOW)
    assert next(iter(monthly)) == dt.date(1678, 1, 1)
    assert monthly[dt.date(1900, 1, 1)] == 1.0
    assert monthly[dt.date(2024, 3, 1)] == 2.0


def test_monthly_expense_filtered_zero_fills_window(make_tx):
    txs = [make_tx(40, when="2024-03-01"), make_tx(9, when="2024-01-20")]
    filtered = apply_filter(txs, FilterSpec(range_days=90), now=NOW)
    result = monthly_expense_filtered(filtered, 90, now=NOW)
    # NOW - 90 days = 2023-12-16
    assert result == {
        dt.date(2023, 12, 1): 0.0,
        dt.date(2024, 1, 1): 9.0,
        dt.date(2024, 2, 1): 0.0,
        dt.date(2024, 3, 1): 40.0,
    }


def test_distinct_categories(make_tx):
    txs = [make_tx(category="Rent"), make_tx(category="Food"), make_tx(category="Rent")]
    assert distinct_categories(txs) == ["All", "Food", "Rent"]
    assert distinct_categories([]) == ["All"]
    # recomputed from whatever it is given
    assert distinct_categories(txs[:1]) == ["All", "Rent"]


def test_empty_input_totals():
    assert filtered_totals([]) == {"income": 0.0, "expense": 0.0, "net": 0.0}
    assert category_totals([]) == {}
