"""Pytest configuration and shared fixtures."""

import io
import sys
from pathlib import Path

import pytest
from rich.console import Console

# Ensure src directory is in Python path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from taskline.config import Config, ConfigModel  # noqa: E402
from taskline.session import Session  # noqa: E402
from taskline.ui import Ui  # noqa: E402


class MemoryStorage:
    """In-memory stand-in for Storage that records every write."""

    def __init__(self, lines=None):
        self.path = Path("memory")
        self.lines = list(lines or [])
        self.writes = 0

    def read_all(self):
        return list(self.lines)

    def write_all(self, lines):
        self.lines = list(lines)
        self.writes += 1


def make_ui():
    """Ui that renders into a buffer; read it back with ``ui.console.file.getvalue()``."""
    return Ui(console=Console(file=io.StringIO(), no_color=True, width=200), use_emoji=False)


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def session(memory_storage):
    return Session(storage=memory_storage, ui=make_ui())


@pytest.fixture
def fresh_config(tmp_path):
    """Install a config rooted in a temporary directory."""
    Config._instance = ConfigModel(data_dir=str(tmp_path))
    yield Config._instance
    Config._instance = None
