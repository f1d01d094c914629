"""Shared fixtures: a fixed clock, sample raw records, and a transaction factory.

Everything time-dependent in the engine accepts a ``now`` argument, so tests
pin it to ``NOW`` instead of reading the wall clock.
"""

from __future__ import annotations

import datetime as dt
import itertools

import pytest

from cashflow.api.dependencies import set_store
from cashflow.data.schemas import Direction, Transaction

NOW = dt.datetime(2024, 3, 15, 12, 0, 0)


@pytest.fixture
def now() -> dt.datetime:
    return NOW


@pytest.fixture
def raw_records() -> list[dict]:
    """A small, deliberately messy export spanning two years."""
    return [
        {"transaction_id": 1, "created_at": "2024-03-10T09:30:00", "amount": "1,200.50",
         "payment_type": "Credit", "sender_name": "Acme Payroll", "payment_method": "Bank"},
        {"transaction_id": "2", "created_at": "2024-03-11", "amount": 300,
         "payment_type": "debit", "category": "Food", "message": "Groceries", "payment_method": "Card"},
        {"transaction_id": 3, "created_at": "2024-02-02T18:00:00Z", "amount": "₹450",
         "payment_type": "OUT", "category": "Transport", "payment_method": "UPI"},
        {"transaction_id": 4, "created_at": None, "day": "2024-01-20", "amount": 80.25,
         "payment_type": "withdrawal", "category": "Food"},
        {"transaction_id": 5, "created_at": "2023-07-04", "amount": "99",
         "payment_type": "expense", "category": "Fun"},
        {"transaction_id": None, "created_at": "not a date", "day": None, "amount": "abc",
         "payment_type": None},
        "not a record",
    ]


_ids = itertools.count(1000)


@pytest.fixture
def make_tx():
    """Build a Transaction with sensible defaults."""

    def _make(
        amount: float = 10.0,
        direction: Direction = Direction.EXPENSE,
        category: str = "Food",
        when: dt.datetime | str = NOW,
        title: str = "",
        payment_method: str = "",
    ) -> Transaction:
        if isinstance(when, str):
            when = dt.datetime.fromisoformat(when)
        return Transaction(
            id=next(_ids),
            timestamp=when,
            amount=amount,
            direction=direction,
            category=category,
            title=title or category,
            payment_method=payment_method,
        )

    return _make


@pytest.fixture(autouse=True)
def _reset_api_store():
    """Keep the API's store singleton from leaking between tests."""
    yield
    set_store(None)
