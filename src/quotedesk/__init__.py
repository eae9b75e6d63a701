"""Pricing and record lifecycle core for turning training requests into quotes."""

from .api import QuoteDesk, open_desk
from .config import Config, load_config
from .errors import NotFoundError, QuoteDeskError, StorageUnavailableError, ValidationError
from .lifecycle import RecordManager
from .models import CostLine, Financials, QuotePayload, Record, RecordKind, RecordStatus, RequestPayload
from .pricing import calculate, format_currency, parse_number_or_default
from .store import RecordStore

__all__ = [
    "QuoteDesk",
    "open_desk",
    "Config",
    "load_config",
    "QuoteDeskError",
    "ValidationError",
    "NotFoundError",
    "StorageUnavailableError",
    "RecordManager",
    "RecordStore",
    "Record",
    "RecordKind",
    "RecordStatus",
    "RequestPayload",
    "QuotePayload",
    "CostLine",
    "Financials",
    "calculate",
    "format_currency",
    "parse_number_or_default",
]
