import pytest

from cashflow.analytics.dashboard import (
    analysis,
    format_amount,
    home_summary,
    recent_transactions,
    search_transactions,
    transaction_history,
)
from cashflow.data.loader import StaticSource
from cashflow.data.schemas import Direction, FilterSpec, FilterType
from cashflow.data.store import DataStore

from conftest import NOW


@pytest.fixture
def store(raw_records) -> DataStore:
    s = DataStore(StaticSource(raw_records))
    s.refresh(now=NOW)
    return s


def test_format_amount():
    assert format_amount(1200.5) == "1,200.50"
    assert format_amount(0) == "0.00"


def test_home_summary(store):
    data = home_summary(store, recent=3)
    assert data["income"] == pytest.approx(1200.50)
    # 300 + 450 + 80.25 + 99 + two zero-amount fallbacks
    assert data["expense"] == pytest.approx(929.25)
    assert data["balance"] == pytest.approx(1200.50 - 929.25)
    assert len(data["recent"]) == 3
    stamps = [tx["timestamp"] for tx in data["recent"]]
    assert stamps == sorted(stamps, reverse=True)


def test_recent_transactions_newest_first(make_tx):
    txs = [make_tx(1, when="2024-01-01"), make_tx(2, when="2024-03-01"), make_tx(3, when="2024-02-01")]
    assert [t.amount for t in recent_transactions(txs, 2)] == [2.0, 3.0]
    assert recent_transactions(txs, 0) == []


def test_analysis_payload_shape(store):
    data = analysis(store, FilterSpec(FilterType.EXPENSE, "All", 90), now=NOW)

    assert data["filter"] == {
        "type": "expense", "category": "All", "range_days": 90,
        "label": FilterSpec(FilterType.EXPENSE, "All", 90).label,
    }
    assert data["categories"][0] == "All"
    assert data["categories"][1:] == sorted(data["categories"][1:])

    months = data["monthly_trend"]["months"]
    assert len(months) == 12
    assert months[-1]["month"] == "2024-03"
    assert months[-1]["label"] == "Mar 2024"

    years = data["yearly_trend"]["years"]
    assert [y["year"] for y in years] == [2023, 2024]

    spending = data["category_spending"]
    assert [row["total"] for row in spending] == sorted((row["total"] for row in spending), reverse=True)
    assert sum(row["share_pct"] for row in spending) == pytest.approx(100, abs=0.5)

    days = data["daily_cashflow"]["days"]
    assert [d["day"] for d in days] == sorted(d["day"] for d in days)
    axis = data["daily_cashflow"]["axis"]
    assert axis["max"] >= max(max(d["income"], d["expense"]) for d in days)

    filtered = data["filtered"]
    assert filtered["totals"]["income"] == 0.0
    assert filtered["totals"]["net"] == -filtered["totals"]["expense"]
    assert filtered["monthly"][-1]["month"] == "2024-03"


def test_analysis_on_empty_store():
    s = DataStore(StaticSource([]))
    s.refresh(now=NOW)
    data = analysis(s, now=NOW)
    assert data["categories"] == ["All"]
    assert data["daily_cashflow"]["days"] == []
    assert data["daily_cashflow"]["axis"] == {"step": 1.0, "max": 1.0, "ticks": [0.0, 1.0]}
    assert len(data["monthly_trend"]["months"]) == 12
    assert data["yearly_trend"]["years"] == []
    assert data["filtered"]["count"] == 0


def test_search_transactions(make_tx):
    txs = [
        make_tx(1200.5, direction=Direction.INCOME, category="Salary", title="Payroll", payment_method="Bank"),
        make_tx(300, category="Food", title="Groceries", payment_method="Card"),
        make_tx(45, category="Transport", title="Uber", payment_method="UPI"),
    ]
    assert [t.title for t in search_transactions(txs, "")] == ["Payroll", "Groceries", "Uber"]
    assert [t.title for t in search_transactions(txs, "  UBER ")] == ["Uber"]
    assert [t.title for t in search_transactions(txs, "card")] == ["Groceries"]
    assert [t.title for t in search_transactions(txs, "1,200")] == ["Payroll"]
    assert [t.title for t in search_transactions(txs, "", FilterType.EXPENSE)] == ["Groceries", "Uber"]
    assert search_transactions(txs, "payroll", FilterType.EXPENSE) == []


def test_transaction_history_strict_and_lenient(store):
    strict = transaction_history(store)
    lenient = transaction_history(store, strict=False)
    assert strict["count"] == 5
    assert strict["dropped"] == 2
    assert lenient["count"] == 7
    assert lenient["dropped"] == 0
    stamps = [tx["timestamp"] for tx in strict["transactions"]]
    assert stamps == sorted(stamps, reverse=True)
