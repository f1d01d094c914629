"""
Record sources: inbox discovery and JSON/CSV loading of raw transaction records.

A source is anything with `fetch_transactions() -> list[dict]`. Records are
returned untouched (apart from CSV NaN cells becoming None); typing them is
the normalizer's job.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Protocol

import pandas as pd

from cashflow.config import INBOX_FOLDER, RECORD_FILE_SUFFIXES


class RecordSource(Protocol):
    def fetch_transactions(self) -> list[dict]: ...


# ---------------------------------------------------------------------------
# File discovery
# ---------------------------------------------------------------------------

def discover_record_files(inbox: Path = INBOX_FOLDER) -> list[Path]:
    """Recursively find JSON/CSV record exports, most recently modified first."""
    if not inbox.exists():
        return []
    matches = [
        p for p in inbox.rglob("*")
        if p.is_file() and p.suffix.lower() in RECORD_FILE_SUFFIXES
    ]
    matches.sort(key=lambda p: p.stat().st_mtime, reverse=True)
    return matches


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def _only_mappings(items: list[Any]) -> list[dict]:
    return [dict(item) for item in items if isinstance(item, dict)]


def load_json_records(filepath: Path) -> list[dict]:
    """Load a JSON array of records, or a `{"data": [...]}` wrapper around one."""
    payload = json.loads(filepath.read_text(encoding="utf-8"))
    if isinstance(payload, dict):
        payload = payload.get("data", [])
    if not isinstance(payload, list):
        raise ValueError(f"{filepath.name}: expected a list of records, got {type(payload).__name__}")
    return _only_mappings(payload)


def load_csv_records(filepath: Path) -> list[dict]:
    """Load a CSV export; every cell stays a string, blank cells become None."""
    df = pd.read_csv(filepath, dtype=str, keep_default_na=False, na_values=[""])
    if df.empty:
        return []
    df = df.astype(object).where(df.notna(), None)
    return df.to_dict(orient="records")


def load_record_file(filepath: Path) -> list[dict]:
    if filepath.suffix.lower() == ".csv":
        return load_csv_records(filepath)
    return load_json_records(filepath)


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------

class JsonFileSource:
    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def fetch_transactions(self) -> list[dict]:
        return load_json_records(self.path)


class CsvFileSource:
    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def fetch_transactions(self) -> list[dict]:
        return load_csv_records(self.path)


class InboxSource:
    """Every record file in an inbox folder, concatenated newest file first."""

    def __init__(self, inbox: Path = INBOX_FOLDER) -> None:
        self.inbox = Path(inbox)

    def files(self) -> list[Path]:
        return discover_record_files(self.inbox)

    def fetch_transactions(self) -> list[dict]:
        records: list[dict] = []
        for filepath in self.files():
            records.extend(load_record_file(filepath))
        return records


class StaticSource:
    """In-memory records handed over by an embedding caller."""

    def __init__(self, records: list[dict]) -> None:
        self.records = list(records)

    def fetch_transactions(self) -> list[dict]:
        return list(self.records)


def source_for_path(path: Path) -> RecordSource:
    """Pick a source for a file or folder path."""
    path = Path(path)
    if path.is_dir():
        return InboxSource(path)
    if path.suffix.lower() == ".csv":
        return CsvFileSource(path)
    return JsonFileSource(path)
