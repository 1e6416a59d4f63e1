"""Device module."""

from .adb import Adb, DeviceError, IDevice, NoDevicesFoundError
from .session import PulledTrace, TraceSession

__all__ = ["Adb", "DeviceError", "IDevice", "NoDevicesFoundError", "PulledTrace", "TraceSession"]
