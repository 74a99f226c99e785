"""
Test configuration and fixtures
"""
import io
import sys
from pathlib import Path

import pytest
from rich.console import Console

# Make both the package (src/) and the shared fakes importable.
project_root = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(project_root / "src"))
sys.path.insert(0, str(Path(__file__).resolve().parent))

from fakes import FakeDeployer  # noqa: E402


@pytest.fixture
def fake_deployer():
    return FakeDeployer()


@pytest.fixture
def console_buffer():
    """A rich Console writing plain text into a StringIO."""
    buffer = io.StringIO()
    return Console(file=buffer, width=200, color_system=None), buffer
