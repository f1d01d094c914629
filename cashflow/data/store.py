"""
DataStore — holds the latest normalized snapshot of the record source.

Loaded at startup, refreshed by the polling task, queried on every request.
A refresh builds a complete new Snapshot and swaps it in one assignment; a
failed fetch keeps the previous snapshot and remembers the error.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Optional

from cashflow.config import INBOX_FOLDER
from cashflow.data.loader import InboxSource, RecordSource
from cashflow.data.normalize import is_known_payment_type, normalize_records, utc_now
from cashflow.data.schemas import NormalizeMode, Transaction


@dataclass(frozen=True)
class Snapshot:
    transactions: tuple[Transaction, ...] = ()           # lenient
    history_transactions: tuple[Transaction, ...] = ()   # strict
    dropped: int = 0
    raw_count: int = 0
    unknown_types: int = 0
    fetched_at: Optional[dt.datetime] = None


class DataStore:
    """Latest transaction snapshot with load/refresh bookkeeping."""

    def __init__(self, source: RecordSource | None = None) -> None:
        self.source: RecordSource = source if source is not None else InboxSource(INBOX_FOLDER)
        self._snapshot = Snapshot()
        self._loaded = False
        self.last_error: Optional[str] = None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> "DataStore":
        """Initial fetch. Prints a one-line summary like every refresh."""
        print("Loading transactions...")
        self.refresh()
        return self

    def refresh(self, now: dt.datetime | None = None) -> bool:
        """Re-fetch and re-normalize. Returns False (keeping the old snapshot) on failure."""
        try:
            raws = self.source.fetch_transactions()
        except Exception as exc:  # any source failure is reported as last_error
            self.last_error = f"{type(exc).__name__}: {exc}"
            print(f"  Fetch failed — keeping previous snapshot ({self.last_error})")
            return False

        now = now or utc_now()
        lenient = normalize_records(raws, NormalizeMode.LENIENT, now)
        strict = normalize_records(raws, NormalizeMode.STRICT, now)
        unknown = sum(
            1 for r in raws
            if not (isinstance(r, dict) and is_known_payment_type(r.get("payment_type")))
        )

        self._snapshot = Snapshot(
            transactions=lenient.transactions,
            history_transactions=strict.transactions,
            dropped=strict.dropped,
            raw_count=len(raws),
            unknown_types=unknown,
            fetched_at=now,
        )
        self.last_error = None
        self._loaded = True

        print(f"  {len(raws):,} records → {len(lenient):,} transactions "
              f"({strict.dropped:,} unusable in strict mode)")
        if unknown:
            print(f"  {unknown:,} records with unrecognized payment_type counted as expenses")
        return True

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    # ------------------------------------------------------------------
    # Snapshot accessors
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return self._snapshot.transactions

    @property
    def history_transactions(self) -> tuple[Transaction, ...]:
        return self._snapshot.history_transactions

    @property
    def dropped(self) -> int:
        return self._snapshot.dropped

    @property
    def fetched_at(self) -> Optional[dt.datetime]:
        return self._snapshot.fetched_at

    def row_count(self) -> int:
        return len(self._snapshot.transactions)

    def date_range(self) -> str:
        """Human-readable date range string."""
        txs = self._snapshot.transactions
        if not txs:
            return "N/A"
        days = [t.day for t in txs]
        return f"{min(days)} to {max(days)}"
