"""
Raw record → Transaction normalization.

Raw records arrive as untyped mappings (JSON objects, CSV rows) where any
field may be missing, null, a string or a number. Every field goes through a
resolver below; lenient and strict modes share the same resolvers and differ
only in whether an unrecoverable record is dropped.
"""
from __future__ import annotations

import datetime as dt
import itertools
import math
import numbers
import re
import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Optional

import pandas as pd

from cashflow.config import DEFAULT_CATEGORY, EXPENSE_TYPES, INCOME_TYPES
from cashflow.data.schemas import Direction, NormalizeMode, Transaction

# Synthetic ids for records without a usable transaction_id: ingestion time in
# milliseconds, incremented so one batch never hands out the same id twice.
_synthetic_ids = itertools.count(int(time.time() * 1000))

_AMOUNT_JUNK_RE = re.compile(r"[^\d.\-]")

# Range a datetime64[ns] column can hold
EARLIEST_TIMESTAMP = dt.datetime(1678, 1, 1)
LATEST_TIMESTAMP = dt.datetime(2262, 4, 11)

_RELATIVE_DATE_WORDS = frozenset({"now", "today"})


def utc_now() -> dt.datetime:
    """Naive UTC "now"; every timestamp in the engine is naive UTC."""
    return dt.datetime.now(dt.timezone.utc).replace(tzinfo=None)


# ---------------------------------------------------------------------------
# Field resolvers (shared fallback table)
# ---------------------------------------------------------------------------

def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _text(value: Any) -> str:
    """Stringify a scalar field; None and NaN become ''."""
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value).strip()


def parse_amount(value: Any) -> Optional[float]:
    """Parse a number or numeric-looking string. None when nothing usable is found."""
    if value is None or isinstance(value, bool):
        return None
    if _is_number(value):
        try:
            amount = float(value)
        except OverflowError:
            return None
    else:
        cleaned = _AMOUNT_JUNK_RE.sub("", str(value).replace(",", ""))
        try:
            amount = float(cleaned)
        except ValueError:
            return None
    if math.isnan(amount) or math.isinf(amount):
        return None
    return amount


def parse_timestamp(value: Any) -> Optional[dt.datetime]:
    """Parse an ISO-8601 date or date-time. Aware values are converted to naive UTC."""
    if value is None or isinstance(value, bool) or _is_number(value):
        return None
    if isinstance(value, dt.date) and not isinstance(value, dt.datetime):
        value = dt.datetime(value.year, value.month, value.day)
    if isinstance(value, dt.datetime):
        if value.tzinfo is not None:
            value = value.astimezone(dt.timezone.utc).replace(tzinfo=None)
        if not (EARLIEST_TIMESTAMP <= value <= LATEST_TIMESTAMP):
            return None
        return value

    text = str(value).strip()
    # pandas resolves these to the wall clock; they are not recorded dates
    if not text or text.lower() in _RELATIVE_DATE_WORDS:
        return None
    ts = pd.to_datetime(text, format="ISO8601", errors="coerce")
    if pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert(None)
    return ts.to_pydatetime()


def parse_id(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, numbers.Integral):
        return int(value)
    if _is_number(value):
        f = float(value)
        return int(f) if math.isfinite(f) and f.is_integer() else None
    text = _text(value)
    try:
        return int(text)
    except ValueError:
        pass
    try:
        f = float(text)
    except ValueError:
        return None
    return int(f) if math.isfinite(f) and f.is_integer() else None


def classify_direction(payment_type: Any) -> Direction:
    """Income for income-like payment types, Expense for everything else."""
    kind = _text(payment_type).lower()
    if kind in INCOME_TYPES:
        return Direction.INCOME
    if kind in EXPENSE_TYPES:
        return Direction.EXPENSE
    # unrecognized types are counted as spending
    return Direction.EXPENSE


def is_known_payment_type(payment_type: Any) -> bool:
    kind = _text(payment_type).lower()
    return kind in INCOME_TYPES or kind in EXPENSE_TYPES


def resolve_timestamp(raw: Mapping) -> Optional[dt.datetime]:
    """created_at, then day. None when neither parses."""
    for field in ("created_at", "day"):
        ts = parse_timestamp(raw.get(field))
        if ts is not None:
            return ts
    return None


def resolve_title(raw: Mapping, direction: Direction) -> str:
    for field in ("message", "category", "sender_name"):
        text = _text(raw.get(field))
        if text:
            return text
    return direction.label


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------

def normalize(
    raw: Any,
    mode: NormalizeMode = NormalizeMode.LENIENT,
    now: dt.datetime | None = None,
) -> Optional[Transaction]:
    """Turn one raw record into a Transaction.

    LENIENT never fails: missing or garbled fields fall back to defaults
    (amount 0.0, timestamp `now`, direction Expense, category Uncategorized).
    STRICT returns None when the record is not a mapping, has no parseable
    date, or has no parseable amount.
    """
    strict = mode == NormalizeMode.STRICT
    if not isinstance(raw, Mapping):
        if strict:
            return None
        raw = {}

    timestamp = resolve_timestamp(raw)
    amount = parse_amount(raw.get("amount"))
    if strict and (timestamp is None or amount is None):
        return None

    direction = classify_direction(raw.get("payment_type"))
    tx_id = parse_id(raw.get("transaction_id"))

    return Transaction(
        id=tx_id if tx_id is not None else next(_synthetic_ids),
        timestamp=timestamp if timestamp is not None else (now or utc_now()),
        amount=abs(amount) if amount is not None else 0.0,
        direction=direction,
        category=_text(raw.get("category")) or DEFAULT_CATEGORY,
        title=resolve_title(raw, direction),
        payment_method=_text(raw.get("payment_method")),
        note=_text(raw.get("message")),
    )


@dataclass(frozen=True)
class NormalizeResult:
    transactions: tuple[Transaction, ...]
    dropped: int = 0

    def __len__(self) -> int:
        return len(self.transactions)


def normalize_records(
    raws: Iterable[Any],
    mode: NormalizeMode = NormalizeMode.LENIENT,
    now: dt.datetime | None = None,
) -> NormalizeResult:
    """Normalize a batch in input order, counting strict-mode drops."""
    now = now or utc_now()
    kept: list[Transaction] = []
    dropped = 0
    for raw in raws:
        tx = normalize(raw, mode, now)
        if tx is None:
            dropped += 1
        else:
            kept.append(tx)
    return NormalizeResult(tuple(kept), dropped)
