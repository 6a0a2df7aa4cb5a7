# packages/tradejournal_core/utils/__init__.py
from .logger import get_logger, JournalLogger, LogContext
from .timeutils import as_utc, utc_now

__all__ = ["get_logger", "JournalLogger", "LogContext", "as_utc", "utc_now"]
