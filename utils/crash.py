"""Crash handling utilities."""

import json
import os
import sys
import traceback

from smalluid.uid import SmallUid
from utils.timestamp import format_timestamp

# Default crash log path, can be overridden by configure()
_crash_log = "logs/crash.log"


def configure(crash_file):
    """Set crash log file path from config."""
    global _crash_log
    _crash_log = crash_file


def _new_record(exc_name, exc_msg, tb, context=None):
    """Crash record keyed by a fresh uid; the uid's clock is the crash time."""
    crash = SmallUid.generate()
    record = {"id": crash.text, "timestamp": format_timestamp(crash.timestamp),
              "type": exc_name, "msg": exc_msg, "traceback": tb}
    if context:
        record["context"] = context
    return record


def _write_crash(record):
    """Append record to the crash file. Never raises."""
    try:
        log_dir = os.path.dirname(_crash_log)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        with open(_crash_log, "a") as f:
            f.write(json.dumps(record) + "\n")
    except OSError:
        pass


def log_crash(exc_type, exc_value, exc_tb):
    """Log sync crash to stderr and file; returns the crash id."""
    tb = "".join(traceback.format_exception(exc_type, exc_value, exc_tb))
    record = _new_record(exc_type.__name__ if exc_type else "Unknown",
                         str(exc_value) if exc_value else "", tb)

    rule = "=" * 60
    sys.stderr.write(f"\n{rule}\nCRASH [{record['id']}] {record['timestamp']}\n{rule}\n")
    sys.stderr.write(f"{record['type']}: {record['msg']}\n{'-' * 60}\n{tb}{rule}\n\n")
    _write_crash(record)
    return record["id"]


def log_async_crash(exc, context_dict, logger=None):
    """Log async task crash; returns the crash id."""
    if exc:
        record = _new_record(type(exc).__name__, str(exc),
                             "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
                             str(context_dict))
    else:
        record = _new_record("AsyncError", context_dict.get("message", "Unknown"), None, str(context_dict))

    if logger:
        logger.error("Async exception", error=record["msg"], crash_id=record["id"],
                     task=str(context_dict.get("future", "unknown")))

    _write_crash(record)
    return record["id"]


def create_async_handler(logger=None):
    """Create async exception handler for event loop."""
    def handler(loop, context):
        log_async_crash(context.get("exception"), context, logger)
    return handler


def install_crash_handler():
    """Install global sync exception handler."""
    sys.excepthook = log_crash
