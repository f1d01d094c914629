"""Record loading, normalization, and the in-memory snapshot store."""
from .loader import InboxSource, JsonFileSource, CsvFileSource, StaticSource, discover_record_files
from .store import DataStore
from .schemas import AxisScale, Direction, FilterSpec, FilterType, NormalizeMode, Transaction
from .normalize import normalize, normalize_records, NormalizeResult
