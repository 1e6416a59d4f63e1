"""On-device tracing session."""

import tempfile
import time
from dataclasses import dataclass
from pathlib import Path

from ..config import TRACE_PROPERTY, poll_interval
from ..logging_config import get_logger
from .adb import IDevice

logger = get_logger(__name__)

EXT_OPTIONS = ("perf_timer", "cpu_timer")


@dataclass
class PulledTrace:
    """Local copies of the files a session produced."""

    trace: Path
    sample: Path | None = None
    state: Path | None = None


class TraceSession:
    """Tracing of one package, started on construction.

    The device-side tracer watches the ``dev.nanoscope`` property: setting it
    to ``package:filename[:ext]`` starts tracing, clearing it flushes the
    trace to ``filename`` in the app's files directory.
    """

    def __init__(
        self,
        device: IDevice,
        package_name: str,
        ext: str | None = None,
        filename: str = "out.txt",
        interval: float | None = None,
    ):
        if ext is not None and ext not in EXT_OPTIONS:
            raise ValueError(f"ext must be one of {EXT_OPTIONS}, got {ext!r}")
        self._device = device
        self.package_name = package_name
        self.ext = ext
        self.filename = filename
        self._interval = poll_interval() if interval is None else interval

        value = f"{package_name}:{filename}"
        if ext is not None:
            value = f"{value}:{ext}"
        self._device.set_system_property(TRACE_PROPERTY, value)
        logger.info("Tracing started for %s", value)

    @property
    def remote_path(self) -> str:
        return f"/data/data/{self.package_name}/files/{self.filename}"

    def wait_for_flush(self) -> None:
        """Block until the device has finished writing the trace file."""
        remote_tmp = f"{self.remote_path}.tmp"
        while not self._device.file_exists(self.remote_path):
            lines = self._device.line_count(remote_tmp)
            if lines is not None:
                logger.info("Events flushed: %s", lines)
            time.sleep(self._interval)

    def stop(self, local_dir: str | Path | None = None) -> PulledTrace:
        """Stop tracing, wait for the flush and pull the results."""
        self._device.set_system_property(TRACE_PROPERTY, "")
        self.wait_for_flush()

        local_dir = Path(local_dir or tempfile.mkdtemp(prefix="nanoscope"))
        local_dir.mkdir(parents=True, exist_ok=True)
        local_trace = local_dir / self.filename
        logger.info("Pulling trace file to %s", local_trace)
        self._device.pull_file(self.remote_path, str(local_trace))

        if self.ext is None:
            return PulledTrace(local_trace)

        # Timer and state files are complete once the main trace exists
        sample = local_dir / f"{self.filename}.timer"
        state = local_dir / f"{self.filename}.state"
        self._device.pull_file(f"{self.remote_path}.timer", str(sample))
        self._device.pull_file(f"{self.remote_path}.state", str(state))
        return PulledTrace(local_trace, sample, state)
