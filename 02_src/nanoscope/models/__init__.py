"""Core data models for Nanoscope."""

from .chrome import COMPLETE_PHASE, ChromeTraceEvent
from .events import Event, compare, sort_events
from .version import Version

__all__ = [
    # Events
    "Event",
    "compare",
    "sort_events",
    # Chrome
    "COMPLETE_PHASE",
    "ChromeTraceEvent",
    # Versions
    "Version",
]
