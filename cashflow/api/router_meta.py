"""
Meta endpoints: health, categories, refresh.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from cashflow.data.store import DataStore
from cashflow.analytics.filters import distinct_categories
from cashflow.api.dependencies import get_store, get_store_or_empty
from cashflow.api.response_models import CategoriesResponse, HealthResponse, RefreshResponse

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/health", response_model=HealthResponse)
def health(store: DataStore = Depends(get_store_or_empty)):
    snap = store.snapshot
    return HealthResponse(
        status="ok" if store.last_error is None else "degraded",
        loaded=store.is_loaded,
        records=snap.raw_count,
        transactions=len(snap.transactions),
        history_transactions=len(snap.history_transactions),
        dropped=snap.dropped,
        unknown_payment_types=snap.unknown_types,
        date_range=store.date_range(),
        fetched_at=snap.fetched_at.isoformat() if snap.fetched_at else None,
        last_error=store.last_error,
    )


@router.get("/categories", response_model=CategoriesResponse)
def list_categories(store: DataStore = Depends(get_store)):
    return CategoriesResponse(categories=distinct_categories(store.transactions))


@router.post("/refresh", response_model=RefreshResponse)
def refresh(store: DataStore = Depends(get_store_or_empty)):
    """Re-fetch the record source now instead of waiting for the next poll."""
    ok = store.refresh()
    return RefreshResponse(
        status="ok" if ok else "failed",
        transactions=store.row_count(),
        dropped=store.dropped,
        error=store.last_error,
    )
