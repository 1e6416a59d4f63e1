"""Timeline module."""

from .serializer import TimelineError, save_timeline, write_timeline

__all__ = ["TimelineError", "save_timeline", "write_timeline"]
