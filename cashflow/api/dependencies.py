"""
FastAPI dependencies — DataStore singleton, filter parsing.
"""
from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, Query

from cashflow.config import ALL_CATEGORIES, DEFAULT_RANGE_DAYS
from cashflow.data.store import DataStore
from cashflow.data.schemas import FilterSpec, FilterType

# ---------------------------------------------------------------------------
# Global store singleton (set during startup)
# ---------------------------------------------------------------------------
_store: DataStore | None = None


def set_store(store: DataStore | None) -> None:
    global _store
    _store = store


def get_store() -> DataStore:
    if _store is None or not _store.is_loaded:
        raise HTTPException(503, "Data not loaded yet")
    return _store


def get_store_or_empty() -> DataStore:
    """Return the store even if it has never loaded (for health/refresh endpoints)."""
    if _store is None:
        raise HTTPException(503, "Server not initialized yet")
    return _store


# ---------------------------------------------------------------------------
# Filter parsing from query params
# ---------------------------------------------------------------------------

def parse_filter_type(
    type: Optional[str] = Query(None, description="all|income|expense"),
) -> FilterType:
    if type is None:
        return FilterType.ALL
    try:
        return FilterType(type.lower())
    except ValueError:
        raise HTTPException(400, f"Invalid type: {type}")


def parse_filter(
    type: Optional[str] = Query(None, description="all|income|expense"),
    category: str = Query(ALL_CATEGORIES, description="Category name or All"),
    range_days: int = Query(DEFAULT_RANGE_DAYS, description="Trailing window in days"),
) -> FilterSpec:
    """Parse filter query parameters into a fresh FilterSpec."""
    ft = parse_filter_type(type)
    try:
        return FilterSpec(type=ft, category=category, range_days=range_days)
    except ValueError as exc:
        raise HTTPException(400, str(exc))
