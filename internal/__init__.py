from internal.logging import LogLevel, StructuredLogger, get_logger
from utils.timestamp import now_millis, format_timestamp

__all__ = [
    "LogLevel",
    "StructuredLogger",
    "get_logger",
    "now_millis",
    "format_timestamp",
]
