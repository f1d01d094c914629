"""
Cashflow Dashboard — FastAPI app factory with startup loading and periodic refresh.
"""
from __future__ import annotations

import asyncio
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cashflow import __version__
from cashflow.config import INBOX_FOLDER, REFRESH_SECONDS
from cashflow.data.store import DataStore
from cashflow.api.dependencies import set_store
from cashflow.api.router_meta import router as meta_router
from cashflow.api.router_dashboard import router as dashboard_router


async def poll_source(store: DataStore, interval: float) -> None:
    """Re-fetch the record source every `interval` seconds until cancelled."""
    while True:
        await asyncio.sleep(interval)
        print("Auto-refreshing transactions...")
        await asyncio.to_thread(store.refresh)


def create_app(store: DataStore | None = None, refresh_seconds: float = REFRESH_SECONDS) -> FastAPI:
    """Build the app. `refresh_seconds <= 0` disables polling."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Load data at startup; own the polling task for the app's lifetime."""
        print(f"  CASHFLOW_DATA_DIR = {os.environ.get('CASHFLOW_DATA_DIR', '(not set)')}")
        print(f"  INBOX_FOLDER = {INBOX_FOLDER}")

        active = store if store is not None else DataStore()
        await asyncio.to_thread(active.load)
        set_store(active)

        if active.row_count() > 0:
            print(f"\nCashflow Dashboard ready — {active.row_count():,} transactions, "
                  f"{active.date_range()}\n")
        else:
            print("\nCashflow Dashboard ready — no transactions yet.\n")

        poller = None
        if refresh_seconds > 0:
            poller = asyncio.create_task(poll_source(active, refresh_seconds))
        try:
            yield
        finally:
            if poller is not None:
                poller.cancel()
                try:
                    await poller
                except asyncio.CancelledError:
                    pass
            set_store(None)

    app = FastAPI(
        title="Cashflow Dashboard API",
        description="Transaction normalization and dashboard series — daily/monthly/yearly sums, "
                    "category totals, filters, chart axes",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(meta_router)
    app.include_router(dashboard_router)
    return app


app = create_app()
