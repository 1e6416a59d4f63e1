"""Pytest configuration and fixtures."""

import sys
from pathlib import Path
from unittest.mock import Mock

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))


CHROME_TRACE = """[
{"name": "main", "ph": "X", "ts": "1000", "dur": "500"},
{"name": "child", "ph": "X", "ts": "1100", "dur": "200"},
{"name": "process_name", "ph": "M", "ts": "0"},
{}
]
"""

NATIVE_TRACE = "0:+main\n100000:+child\n300000:POP\n500000:POP\n"


@pytest.fixture
def chrome_trace(tmp_path):
    """Write a small Chrome trace file."""
    path = tmp_path / "trace.json"
    path.write_text(CHROME_TRACE, encoding="utf-8")
    return path


@pytest.fixture
def native_trace(tmp_path):
    """Write a small native trace file."""
    path = tmp_path / "out.txt"
    path.write_text(NATIVE_TRACE, encoding="utf-8")
    return path


@pytest.fixture
def mock_device():
    """Create mock device with the IDevice surface."""
    from nanoscope.device import Adb

    device = Mock(spec=Adb)
    device.set_system_property.return_value = 0
    device.pull_file.return_value = 0
    return device


@pytest.fixture
def mock_retriever(tmp_path):
    """Create mock package retriever."""
    from nanoscope.packages import PackageRetriever

    retriever = Mock(spec=PackageRetriever)
    retriever.fetch.return_value = tmp_path / "package"
    retriever.run_script.return_value = 0
    return retriever
