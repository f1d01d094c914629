"""
Shared helpers for the aggregators: transaction frames, safe math, JSON cleanup.
"""
from __future__ import annotations

import datetime as dt
import math
from collections.abc import Iterable

import numpy as np
import pandas as pd

from cashflow.data.schemas import Direction, Transaction

FRAME_COLUMNS = ["id", "timestamp", "amount", "direction", "category"]


def to_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Tabulate transactions, preserving input order, with day/month/year keys."""
    rows = [
        (t.id, t.timestamp, t.amount, t.direction.value, t.category)
        for t in transactions
    ]
    df = pd.DataFrame.from_records(rows, columns=FRAME_COLUMNS)
    df["timestamp"] = pd.to_datetime(df["timestamp"])
    df["amount"] = df["amount"].astype("float64")
    df["day"] = df["timestamp"].dt.normalize()
    df["month"] = df["timestamp"].dt.to_period("M")
    df["year"] = df["timestamp"].dt.year
    return df


def of_direction(df: pd.DataFrame, direction: Direction) -> pd.DataFrame:
    return df[df["direction"] == direction.value]


def month_start(value: dt.date | dt.datetime) -> dt.date:
    return dt.date(value.year, value.month, 1)


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide safely, returning default if denominator is zero or NaN."""
    if denominator == 0 or pd.isna(denominator):
        return default
    result = numerator / denominator
    return default if pd.isna(result) else result


def pct_of_total(part: float, total: float) -> float:
    """Percentage of total."""
    return safe_divide(part, total) * 100


def sanitize_for_json(obj):
    """Recursively convert numpy/pandas/date values to JSON-safe Python values.

    Dict keys that are dates become ISO strings; NaN/inf floats become 0.0.
    """
    if isinstance(obj, dict):
        clean = {}
        for k, v in obj.items():
            if k is None:
                continue
            if isinstance(k, float) and (math.isnan(k) or math.isinf(k)):
                continue
            clean[_json_key(k)] = sanitize_for_json(v)
        return clean
    if isinstance(obj, (list, tuple)):
        return [sanitize_for_json(v) for v in obj]
    if isinstance(obj, Transaction):
        return sanitize_for_json(obj.to_dict())
    if isinstance(obj, (dt.date, dt.datetime)):
        return obj.isoformat()
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        v = float(obj)
        return 0.0 if (math.isnan(v) or math.isinf(v)) else v
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, float):
        return 0.0 if (math.isnan(obj) or math.isinf(obj)) else obj
    return obj


def _json_key(key) -> str:
    if isinstance(key, str):
        return key
    if isinstance(key, (dt.date, dt.datetime)):
        return key.isoformat()
    if isinstance(key, np.integer):
        return str(int(key))
    return str(key)
