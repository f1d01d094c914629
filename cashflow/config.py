"""
Cashflow Dashboard — Configuration: paths, refresh interval, vocabularies.
"""
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths: override with CASHFLOW_DATA_DIR env var for deployment
# ---------------------------------------------------------------------------
_data_dir = Path(os.environ.get("CASHFLOW_DATA_DIR", str(Path.home() / "Cashflow")))
INBOX_FOLDER = _data_dir / "inbox"

# Record exports picked up from the inbox (matched on suffix, case-insensitive)
RECORD_FILE_SUFFIXES = (".json", ".csv")

# ---------------------------------------------------------------------------
# Polling: the API re-fetches the record source on this interval
# ---------------------------------------------------------------------------
REFRESH_SECONDS = float(os.environ.get("CASHFLOW_REFRESH_SECONDS", "30"))

# ---------------------------------------------------------------------------
# payment_type vocabularies (compared lower-cased and trimmed)
# Anything matching neither set is classified as an expense.
# ---------------------------------------------------------------------------
INCOME_TYPES = frozenset({"income", "in", "credit"})
EXPENSE_TYPES = frozenset({"expense", "out", "withdrawal", "debit"})

# ---------------------------------------------------------------------------
# Category defaults
# ---------------------------------------------------------------------------
DEFAULT_CATEGORY = "Uncategorized"
ALL_CATEGORIES = "All"

# ---------------------------------------------------------------------------
# Dashboard defaults
# ---------------------------------------------------------------------------
DEFAULT_RANGE_DAYS = 30
RANGE_CHOICES = (7, 30, 90, 365)
MONTH_WINDOW = 12
RECENT_COUNT = 5

# Chart axes get at most this many gridline divisions
AXIS_MAX_DIVISIONS = 4
AXIS_MULTIPLIERS = (1.0, 2.0, 5.0, 10.0)
