"""
Pydantic response schemas for the API.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    loaded: bool
    records: int
    transactions: int
    history_transactions: int
    dropped: int
    unknown_payment_types: int
    date_range: str
    fetched_at: Optional[str] = None
    last_error: Optional[str] = None


class CategoriesResponse(BaseModel):
    categories: list[str]


class RefreshResponse(BaseModel):
    status: str
    transactions: int
    dropped: int
    error: Optional[str] = None
