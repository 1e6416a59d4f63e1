"""Project-level configuration and path helpers."""

import os
from pathlib import Path
from typing import Union

from .models.version import Version

PathLike = Union[str, Path]

ROM_VERSION = Version(0, 2, 4)
RELEASES_URL = "https://github.com/uber/nanoscope-art/releases/download"
DEFAULT_ROM_URL = f"{RELEASES_URL}/{ROM_VERSION}/nanoscope-rom-{ROM_VERSION}.zip"
DEFAULT_EMULATOR_URL = f"{RELEASES_URL}/{ROM_VERSION}/nanoscope-emulator-{ROM_VERSION}.zip"

# Hardware name reported by the only device the ROM supports (Nexus 6P)
SUPPORTED_HARDWARE = "angler"
TRACE_PROPERTY = "dev.nanoscope"
ROM_VERSION_PROPERTY = "ro.build.nanoscope"


def resolve_home(env_value: PathLike | None = None) -> Path:
    """Resolve NANOSCOPE_HOME to an absolute path."""
    if env_value is None:
        env_value = os.getenv("NANOSCOPE_HOME")
    if not env_value:
        return Path.home() / ".nanoscope"
    return Path(env_value).expanduser().resolve()


def logs_dir() -> Path:
    return resolve_home() / "logs"


def default_log_path() -> Path:
    return logs_dir() / "nanoscope.log"


def rom_url() -> str:
    return os.getenv("NANOSCOPE_ROM_URL", DEFAULT_ROM_URL)


def emulator_url() -> str:
    return os.getenv("NANOSCOPE_EMULATOR_URL", DEFAULT_EMULATOR_URL)


def adb_path() -> str:
    return os.getenv("NANOSCOPE_ADB", "adb")


def poll_interval() -> float:
    """Seconds between probes while waiting for the device to flush a trace."""
    return float(os.getenv("NANOSCOPE_POLL_INTERVAL", "0.5"))
