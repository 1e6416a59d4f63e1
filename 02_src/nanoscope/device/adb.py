"""adb-backed device access."""

import shlex
import subprocess
from typing import Protocol

from ..config import ROM_VERSION_PROPERTY, adb_path
from ..logging_config import get_logger

logger = get_logger(__name__)


class DeviceError(RuntimeError):
    """The device did not give a usable answer."""


class NoDevicesFoundError(DeviceError):
    """adb has no connected device or emulator."""


class IDevice(Protocol):
    """Shell access to a connected Android device."""

    def root(self) -> None:
        """Restart adbd with root permissions."""
        ...

    def shell(self, command: str) -> str:
        """Run a shell command on the device and return its stdout."""
        ...

    def set_system_property(self, name: str, value: str) -> int:
        """Set a system property; returns the exit status."""
        ...

    def get_system_property(self, name: str) -> str:
        """Read a system property."""
        ...

    def get_foreground_package(self) -> str:
        """Package name of the resumed activity."""
        ...

    def file_exists(self, path: str) -> bool:
        """Whether a remote file exists."""
        ...

    def line_count(self, path: str) -> int | None:
        """Lines in a remote file, or None if it cannot be read."""
        ...

    def pull_file(self, remote_path: str, local_path: str) -> int:
        """Copy a remote file to the host; returns the exit status."""
        ...

    def get_device_hardware(self) -> str:
        """Value of ro.hardware."""
        ...

    def get_rom_version(self) -> str:
        """Nanoscope ROM version string reported by the device."""
        ...


class Adb:
    """IDevice implementation that shells out to the adb binary."""

    def __init__(self, executable: str | None = None):
        self._adb = executable or adb_path()

    def _run(self, *args: str) -> subprocess.CompletedProcess:
        command = [self._adb, *args]
        logger.debug("Running %s", shlex.join(command))
        return subprocess.run(command, capture_output=True, text=True)

    def root(self) -> None:
        self._run("root")

    def shell(self, command: str) -> str:
        return self._run("shell", command).stdout

    def set_system_property(self, name: str, value: str) -> int:
        return self._run("shell", f"setprop {name} {shlex.quote(value)}").returncode

    def get_system_property(self, name: str) -> str:
        return self.shell(f"getprop {name}").strip()

    def get_foreground_package(self) -> str:
        output = self.shell("dumpsys activity activities")
        for line in output.splitlines():
            if "mFocusedActivity" in line or "ResumedActivity" in line:
                # e.g. "mResumedActivity: ActivityRecord{9a3 u0 com.example/.Main t12}"
                component = line.strip().split(" ")[3]
                return component.split("/")[0]
        raise DeviceError("No foreground activity found")

    def file_exists(self, path: str) -> bool:
        output = self.shell(f'[ ! -e "{path}" ]; echo $?').strip()
        return output == "1"

    def line_count(self, path: str) -> int | None:
        output = self.shell(f"wc -l < {path}").strip()
        try:
            return int(output)
        except ValueError:
            return None

    def pull_file(self, remote_path: str, local_path: str) -> int:
        return self._run("pull", remote_path, local_path).returncode

    def get_device_hardware(self) -> str:
        return self.get_system_property("ro.hardware")

    def get_rom_version(self) -> str:
        result = self._run("shell", f"getprop {ROM_VERSION_PROPERTY}")
        if "no devices/emulators found" in result.stderr:
            raise NoDevicesFoundError("No adb-connected devices found.")
        return result.stdout.strip()
