"""Tests for the Application facade."""

import pytest

from nanoscope.app import Application, IncompatibleVersionError
from nanoscope.config import DEFAULT_EMULATOR_URL, DEFAULT_ROM_URL
from nanoscope.device import TraceSession
from nanoscope.models import Version
from nanoscope.packages import FlashError

from conftest import NATIVE_TRACE


class TestOpenTrace:
    """Tests for Application.open_trace()."""

    def test_chrome_trace_report(self, chrome_trace, tmp_path):
        """Test that a Chrome trace is converted and embedded in the report."""
        report = Application().open_trace(chrome_trace, dest=tmp_path / "report.html")
        html = report.read_text(encoding="utf-8")
        assert f">{NATIVE_TRACE}<" in html

    def test_native_trace_with_aux_data(self, native_trace, tmp_path):
        """Test that native traces and auxiliary files are embedded as-is."""
        sample = tmp_path / "out.txt.timer"
        sample.write_text("10:20\n")
        report = Application().open_trace(
            native_trace, sample=sample, state=tmp_path / "absent", dest=tmp_path / "r.html"
        )
        html = report.read_text(encoding="utf-8")
        assert f">{NATIVE_TRACE}<" in html
        assert ">10:20\n<" in html
        assert '<script id="state-data" type="text/plain"></script>' in html


class TestCheckVersion:
    """Tests for Application.check_version()."""

    def test_compatible(self, mock_device):
        """Test that a matching ROM passes."""
        mock_device.get_rom_version.return_value = "0.2.7"
        Application(device=mock_device, supported_version=Version(0, 2, 4)).check_version()

    def test_newer_minor_rejected(self, mock_device):
        """Test that a pre-1.0 minor mismatch is incompatible."""
        mock_device.get_rom_version.return_value = "0.3.0"
        app = Application(device=mock_device, supported_version=Version(0, 2, 4))
        with pytest.raises(IncompatibleVersionError) as excinfo:
            app.check_version()
        assert excinfo.value.rom_version == Version(0, 3, 0)
        assert excinfo.value.supported_version == Version(0, 2, 4)

    def test_unrecognised_rom(self, mock_device):
        """Test that a stock ROM reports no version."""
        mock_device.get_rom_version.return_value = ""
        with pytest.raises(IncompatibleVersionError) as excinfo:
            Application(device=mock_device).check_version()
        assert excinfo.value.rom_version is None


class TestStartTracing:
    """Tests for Application.start_tracing()."""

    def test_explicit_package(self, mock_device):
        """Test tracing a named package."""
        session = Application(device=mock_device).start_tracing("com.example", "perf_timer")
        assert isinstance(session, TraceSession)
        assert session.package_name == "com.example"
        assert session.ext == "perf_timer"
        mock_device.root.assert_called_once()
        mock_device.get_foreground_package.assert_not_called()

    def test_foreground_package(self, mock_device):
        """Test that the foreground app is traced by default."""
        mock_device.get_foreground_package.return_value = "com.foreground"
        session = Application(device=mock_device).start_tracing()
        assert session.package_name == "com.foreground"


class TestFlashDevice:
    """Tests for Application.flash_device()."""

    def test_unsupported_hardware(self, mock_device, mock_retriever):
        """Test that only the supported device can be flashed."""
        mock_device.get_device_hardware.return_value = "bullhead"
        app = Application(device=mock_device, retriever=mock_retriever)
        with pytest.raises(FlashError, match="Nexus 6p"):
            app.flash_device()
        mock_retriever.fetch.assert_not_called()

    def test_flash(self, mock_device, mock_retriever, tmp_path):
        """Test fetching the ROM and running its installer."""
        mock_device.get_device_hardware.return_value = "angler"
        Application(device=mock_device, retriever=mock_retriever).flash_device()
        mock_device.root.assert_called_once()
        mock_retriever.fetch.assert_called_once_with(DEFAULT_ROM_URL)
        mock_retriever.run_script.assert_called_once_with(tmp_path / "package", "install.sh")

    def test_flash_failure(self, mock_device, mock_retriever):
        """Test that a failing installer is reported."""
        mock_device.get_device_hardware.return_value = "angler"
        mock_retriever.run_script.return_value = 2
        app = Application(device=mock_device, retriever=mock_retriever)
        with pytest.raises(FlashError, match="Flash failed: 2"):
            app.flash_device("https://example.com/rom.zip")
        mock_retriever.fetch.assert_called_once_with("https://example.com/rom.zip")


class TestLaunchEmulator:
    """Tests for Application.launch_emulator()."""

    def test_launch(self, mock_retriever, tmp_path):
        """Test fetching the emulator and running its launcher."""
        mock_retriever.run_script.return_value = 0
        status = Application(retriever=mock_retriever).launch_emulator()
        assert status == 0
        mock_retriever.fetch.assert_called_once_with(DEFAULT_EMULATOR_URL)
        mock_retriever.run_script.assert_called_once_with(tmp_path / "package", "emulator.sh")

    def test_url_from_environment(self, mock_retriever, monkeypatch):
        """Test that NANOSCOPE_EMULATOR_URL overrides the default."""
        monkeypatch.setenv("NANOSCOPE_EMULATOR_URL", "https://mirror/emu.zip")
        Application(retriever=mock_retriever).launch_emulator()
        mock_retriever.fetch.assert_called_once_with("https://mirror/emu.zip")
