"""Report module."""

from .assembler import (
    DEFAULT_PLACEHOLDERS,
    SAMPLE,
    STATE,
    TRACE,
    Placeholder,
    ReportAssembler,
    ReportError,
    build_report,
    default_template,
)

__all__ = [
    "DEFAULT_PLACEHOLDERS",
    "SAMPLE",
    "STATE",
    "TRACE",
    "Placeholder",
    "ReportAssembler",
    "ReportError",
    "build_report",
    "default_template",
]
