"""Native timeline writer.

Each line is ``<offset>:+<name>`` for a push or ``<offset>:POP`` for a pop,
where ``offset`` is integer nanoseconds since the first event.
"""

from pathlib import Path
from typing import Iterable, TextIO

from ..logging_config import get_logger
from ..models import Event

logger = get_logger(__name__)

POP = "POP"


class TimelineError(ValueError):
    """Events do not form a properly nested push/pop sequence."""


def format_line(event: Event, offset: int) -> str:
    if event.is_start:
        return f"{offset}:+{event.name}\n"
    return f"{offset}:{POP}\n"


def write_timeline(events: Iterable[Event], out: TextIO) -> int:
    """Write events in the order given and return the number of lines.

    No sorting happens here. Timestamps must not decrease, and every end
    must close the innermost open span, which has the same duration.
    Anything else, or spans still open at the end, raises TimelineError.
    """
    first_timestamp: int | None = None
    previous = 0
    open_spans: list[Event] = []
    count = 0
    for event in events:
        line = count + 1
        timestamp = int(event.timestamp)
        if first_timestamp is None:
            first_timestamp = previous = timestamp
            logger.debug("First timestamp: %s", first_timestamp)
        elif timestamp < previous:
            raise TimelineError(
                f"Event {event.name!r} at line {line} goes back in time "
                f"({timestamp} < {previous})"
            )
        previous = timestamp

        if event.is_start:
            open_spans.append(event)
        elif not open_spans:
            raise TimelineError(f"Unmatched end of span {event.name!r} at line {line}")
        elif open_spans[-1].duration != event.duration:
            # POP lines carry no name, so spans of equal duration are interchangeable
            raise TimelineError(
                f"End of span {event.name!r} at line {line} would close {open_spans[-1].name!r}"
            )
        else:
            open_spans.pop()

        out.write(format_line(event, timestamp - first_timestamp))
        count += 1

    if open_spans:
        raise TimelineError(f"{len(open_spans)} span(s) still open at end of timeline")

    logger.info("Wrote %s timeline lines", count)
    return count


def save_timeline(events: Iterable[Event], path: str | Path) -> Path:
    """Write a timeline file at ``path``."""
    path = Path(path)
    with path.open("w", encoding="utf-8", newline="\n") as out:
        write_timeline(events, out)
    return path
