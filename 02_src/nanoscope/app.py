"""Application facade tying import, rendering and device workflows together."""

from pathlib import Path
from typing import Protocol

from .config import ROM_VERSION, SUPPORTED_HARDWARE, emulator_url, rom_url
from .device import Adb, IDevice, TraceSession
from .importer import import_trace
from .logging_config import get_logger
from .models import Version
from .packages import FlashError, IPackageRetriever, PackageRetriever
from .report import build_report

logger = get_logger(__name__)


class IncompatibleVersionError(RuntimeError):
    """Device ROM and client versions do not match."""

    def __init__(self, supported_version: Version, rom_version: Version | None):
        self.supported_version = supported_version
        self.rom_version = rom_version
        super().__init__(
            f"ROM version {rom_version or 'unknown'} is incompatible "
            f"with supported version {supported_version}"
        )


class IApplication(Protocol):
    """Entry points used by the command line."""

    def open_trace(
        self,
        trace: str | Path,
        sample: str | Path | None = None,
        state: str | Path | None = None,
        dest: str | Path | None = None,
    ) -> Path:
        """Convert a trace if needed and build its HTML report."""
        ...

    def check_version(self) -> None:
        """Raise IncompatibleVersionError unless the device ROM is supported."""
        ...

    def start_tracing(self, package_name: str | None = None, ext: str | None = None) -> TraceSession:
        """Begin tracing a package (default: the foreground app)."""
        ...

    def flash_device(self, url: str | None = None) -> None:
        """Install the Nanoscope ROM on the connected device."""
        ...

    def launch_emulator(self, url: str | None = None) -> int:
        """Launch the Nanoscope emulator."""
        ...


class Application:
    """Default wiring of device, package retriever and report building."""

    def __init__(
        self,
        device: IDevice | None = None,
        retriever: IPackageRetriever | None = None,
        supported_version: Version = ROM_VERSION,
    ):
        self._device = device
        self._retriever = retriever
        self._supported_version = supported_version

    @property
    def device(self) -> IDevice:
        if self._device is None:
            self._device = Adb()
        return self._device

    @property
    def retriever(self) -> IPackageRetriever:
        if self._retriever is None:
            self._retriever = PackageRetriever()
        return self._retriever

    def open_trace(
        self,
        trace: str | Path,
        sample: str | Path | None = None,
        state: str | Path | None = None,
        dest: str | Path | None = None,
    ) -> Path:
        timeline = import_trace(trace)
        report = build_report(timeline, sample=sample, state=state, dest=dest)
        logger.info("Report for %s written to %s", trace, report)
        return report

    def get_rom_version(self) -> Version | None:
        try:
            return Version.from_string(self.device.get_rom_version())
        except ValueError:
            return None

    def check_version(self) -> None:
        rom_version = self.get_rom_version()
        if rom_version is None or not rom_version.is_compatible_with(self._supported_version):
            raise IncompatibleVersionError(self._supported_version, rom_version)

    def start_tracing(self, package_name: str | None = None, ext: str | None = None) -> TraceSession:
        self.device.root()
        package_name = package_name or self.device.get_foreground_package()
        return TraceSession(self.device, package_name, ext)

    def flash_device(self, url: str | None = None) -> None:
        hardware = self.device.get_device_hardware()
        if hardware != SUPPORTED_HARDWARE:
            raise FlashError("Sorry, Nexus 6p is currently the only supported device.")
        self.device.root()

        out_dir = self.retriever.fetch(url or rom_url())
        logger.info("Flashing device from %s", out_dir)
        status = self.retriever.run_script(out_dir, "install.sh")
        if status != 0:
            raise FlashError(f"Flash failed: {status}")

    def launch_emulator(self, url: str | None = None) -> int:
        out_dir = self.retriever.fetch(url or emulator_url())
        logger.info("Launching emulator from %s", out_dir)
        return self.retriever.run_script(out_dir, "emulator.sh")
