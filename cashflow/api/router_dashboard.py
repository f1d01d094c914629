"""
Dashboard endpoints — Home, Analysis, Transaction History.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from cashflow.config import RECENT_COUNT
from cashflow.data.store import DataStore
from cashflow.data.schemas import FilterSpec, FilterType
from cashflow.api.dependencies import get_store, parse_filter, parse_filter_type
from cashflow.analytics.dashboard import analysis, home_summary, transaction_history

router = APIRouter(prefix="/api", tags=["dashboard"])


@router.get("/home")
def home(
    recent: int = Query(RECENT_COUNT, ge=0, description="Number of recent transactions"),
    store: DataStore = Depends(get_store),
):
    """Balance, income and expense totals with the latest transactions."""
    return JSONResponse(content=home_summary(store, recent))


@router.get("/analysis")
def analysis_page(
    store: DataStore = Depends(get_store),
    spec: FilterSpec = Depends(parse_filter),
):
    """Trend, category and filtered-insight series with axis scales."""
    return JSONResponse(content=analysis(store, spec))


@router.get("/transactions")
def history(
    q: str = Query("", description="Search title, category, payment method or amount"),
    ftype: FilterType = Depends(parse_filter_type),
    strict: bool = Query(True, description="Leave out records that could not be rebuilt"),
    store: DataStore = Depends(get_store),
):
    """Searchable transaction history, newest first."""
    return JSONResponse(content=transaction_history(store, q, ftype, strict))
