"""
Typed values that cross the normalization boundary: transactions, filters, axis scales.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from enum import Enum

from cashflow.config import ALL_CATEGORIES, DEFAULT_RANGE_DAYS


class Direction(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"

    @property
    def label(self) -> str:
        return "Income" if self is Direction.INCOME else "Expense"


class FilterType(str, Enum):
    ALL = "all"
    INCOME = "income"
    EXPENSE = "expense"

    def matches(self, direction: Direction) -> bool:
        if self is FilterType.ALL:
            return True
        return self.value == direction.value


class NormalizeMode(str, Enum):
    LENIENT = "lenient"   # best-effort Transaction for every record (default)
    STRICT = "strict"     # drop records that cannot be reconstructed


@dataclass(frozen=True)
class Transaction:
    """One normalized transaction. `amount` is a magnitude; the sign lives in `direction`."""
    id: int
    timestamp: dt.datetime
    amount: float
    direction: Direction
    category: str
    title: str
    payment_method: str = ""
    note: str = ""

    @property
    def is_income(self) -> bool:
        return self.direction is Direction.INCOME

    @property
    def is_expense(self) -> bool:
        return self.direction is Direction.EXPENSE

    @property
    def day(self) -> dt.date:
        return self.timestamp.date()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "amount": self.amount,
            "direction": self.direction.value,
            "category": self.category,
            "title": self.title,
            "payment_method": self.payment_method,
            "note": self.note,
        }


@dataclass(frozen=True)
class FilterSpec:
    """Type / category / trailing-window filter, built fresh for every query."""
    type: FilterType = FilterType.ALL
    category: str = ALL_CATEGORIES
    range_days: int = DEFAULT_RANGE_DAYS

    def __post_init__(self) -> None:
        if self.range_days < 1:
            raise ValueError(f"range_days must be positive, got {self.range_days}")

    @property
    def label(self) -> str:
        kind = "All types" if self.type is FilterType.ALL else self.type.value.title()
        return f"{kind} · {self.category} · last {self.range_days} days"


@dataclass(frozen=True)
class AxisScale:
    step: float
    nice_max: float

    @property
    def divisions(self) -> int:
        return round(self.nice_max / self.step)

    def ticks(self) -> list[float]:
        """Gridline values from 0 up to and including nice_max."""
        return [self.step * i for i in range(self.divisions + 1)]
