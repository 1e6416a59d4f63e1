"""Trace import module."""

from .chrome_importer import (
    TraceFormatError,
    import_trace,
    is_chrome_trace,
    read_chrome_events,
    record_to_events,
)

__all__ = [
    "TraceFormatError",
    "import_trace",
    "is_chrome_trace",
    "read_chrome_events",
    "record_to_events",
]
