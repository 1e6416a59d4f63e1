"""Nanoscope client: trace import and HTML timeline reports."""

from .app import Application, IApplication, IncompatibleVersionError
from .device import Adb, DeviceError, IDevice, NoDevicesFoundError, PulledTrace, TraceSession
from .importer import TraceFormatError, import_trace, is_chrome_trace, read_chrome_events
from .models import ChromeTraceEvent, Event, Version, compare, sort_events
from .packages import FlashError, IPackageRetriever, PackageRetriever
from .report import Placeholder, ReportAssembler, ReportError, build_report
from .timeline import TimelineError, save_timeline, write_timeline

__version__ = "0.1.0"

__all__ = [
    # Application
    "Application",
    "IApplication",
    "IncompatibleVersionError",
    # Models
    "Event",
    "ChromeTraceEvent",
    "Version",
    "compare",
    "sort_events",
    # Import / export
    "TraceFormatError",
    "import_trace",
    "is_chrome_trace",
    "read_chrome_events",
    "TimelineError",
    "save_timeline",
    "write_timeline",
    # Report
    "Placeholder",
    "ReportAssembler",
    "ReportError",
    "build_report",
    # Collaborators
    "IDevice",
    "Adb",
    "DeviceError",
    "NoDevicesFoundError",
    "PulledTrace",
    "TraceSession",
    "IPackageRetriever",
    "PackageRetriever",
    "FlashError",
]
