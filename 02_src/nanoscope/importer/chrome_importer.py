"""Chrome trace importer.

Chrome traces written one record per line, inside a JSON array::

    [
    {"name": "onCreate", "ph": "X", "ts": "1000", "dur": "500"},
    {},
    ]

Complete events (``ph == "X"``) become a start/end Event pair; every other
phase is dropped.
"""

import math
import os
import tempfile
from pathlib import Path
from typing import Iterable, Iterator

from pydantic import ValidationError

from ..logging_config import get_logger
from ..models import ChromeTraceEvent, Event, sort_events
from ..timeline import save_timeline

logger = get_logger(__name__)

NS_PER_US = 1000


class TraceFormatError(ValueError):
    """A trace record could not be parsed."""

    def __init__(self, message: str, line_number: int | None = None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


def is_chrome_trace(first_line: str | None) -> bool:
    """Chrome traces open with the JSON array bracket."""
    return bool(first_line) and first_line.startswith("[")


def _is_padding(line: str) -> bool:
    return line in ("", "[", "]") or "{}" in line


def _iter_records(lines: Iterable[str]) -> Iterator[tuple[int, ChromeTraceEvent]]:
    for line_number, raw in enumerate(lines, start=1):
        line = raw.strip()
        if _is_padding(line):
            continue
        if line.endswith(","):
            line = line[:-1]
        try:
            yield line_number, ChromeTraceEvent.model_validate_json(line)
        except ValidationError as e:
            raise TraceFormatError(str(e), line_number) from e


def _microseconds(value: str | None, field: str, line_number: int) -> float:
    if value is None:
        raise TraceFormatError(f"complete event is missing {field!r}", line_number)
    try:
        number = float(value)
    except ValueError as e:
        raise TraceFormatError(f"{field!r} is not a number: {value!r}", line_number) from e
    if not math.isfinite(number):
        raise TraceFormatError(f"{field!r} is not finite: {value!r}", line_number)
    return number


def record_to_events(record: ChromeTraceEvent, line_number: int = 0) -> tuple[Event, Event]:
    """Split one complete event into its start and end boundaries (in ns)."""
    start_us = _microseconds(record.ts, "ts", line_number)
    end_us = start_us + _microseconds(record.dur, "dur", line_number)
    start = start_us * NS_PER_US
    end = end_us * NS_PER_US
    duration = end - start
    return (
        Event(record.name, start, True, duration),
        Event(record.name, end, False, duration),
    )


def read_chrome_events(lines: Iterable[str]) -> list[Event]:
    """Parse Chrome trace lines into canonically ordered events.

    Any malformed record aborts the whole import with TraceFormatError.
    """
    events: list[Event] = []
    for line_number, record in _iter_records(lines):
        if not record.is_complete:
            continue
        events.extend(record_to_events(record, line_number))

    logger.info("Imported %s events from Chrome trace", len(events))
    return sort_events(events)


def import_trace(source: str | Path, dest: str | Path | None = None) -> Path:
    """Return a native timeline file for ``source``.

    Native traces are returned as-is. Chrome traces are converted into
    ``dest``, or into a new temporary file when no destination is given.
    """
    source = Path(source)
    # Native traces may hold arbitrary bytes in method names
    with source.open("r", encoding="utf-8", errors="surrogateescape") as f:
        first_line = f.readline()
    if not is_chrome_trace(first_line):
        logger.info("%s is a native trace", source)
        return source

    with source.open("r", encoding="utf-8") as f:
        try:
            events = read_chrome_events(f)
        except UnicodeDecodeError as e:
            raise TraceFormatError(f"Chrome trace is not valid UTF-8: {e}") from e

    if dest is None:
        fd, name = tempfile.mkstemp(prefix="nanoscope", suffix=".txt")
        os.close(fd)
        dest = name

    path = save_timeline(events, dest)
    logger.info(
        "Converted Chrome trace %s to %s",
        source,
        path,
        extra={"context": {"source": str(source), "dest": str(path), "events": len(events)}},
    )
    return path
