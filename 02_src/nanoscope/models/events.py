"""Span boundary events and their canonical order."""

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class Event:
    """One boundary (start or end) of a traced span.

    ``duration`` belongs to the span, but it is stored on both boundaries
    so that each one can be ordered on its own.
    """

    name: str
    timestamp: float  # nanoseconds
    is_start: bool
    duration: float  # nanoseconds, end - start

    def sort_key(self) -> tuple[float, bool, float]:
        """Key for the canonical order.

        At equal timestamps ends come before starts, outer starts (longer)
        before inner ones, and inner ends (shorter) before outer ones.
        """
        return (
            self.timestamp,
            self.is_start,
            -self.duration if self.is_start else self.duration,
        )

    def __lt__(self, other: "Event") -> bool:
        if not isinstance(other, Event):
            return NotImplemented
        return self.sort_key() < other.sort_key()


def compare(a: Event, b: Event) -> int:
    """Three-way comparison in the canonical order."""
    ka, kb = a.sort_key(), b.sort_key()
    return (ka > kb) - (ka < kb)


def sort_events(events: Iterable[Event]) -> list[Event]:
    """Stable sort into the canonical order. Identical events are kept."""
    return sorted(events, key=Event.sort_key)
