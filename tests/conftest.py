"""
Shared pytest fixtures for credfile tests.

This module provides common fixtures including:
- users_file: write a users file into a temporary directory
- RecordingListener: counts refresh notifications
- Hasher doubles for delegation tests
"""

import os
import sys
import threading
from pathlib import Path
from typing import Callable, List

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


class RecordingListener:
    """Refresh listener that records every call."""

    def __init__(self, name: str = "listener", calls: List[str] = None):
        self.name = name
        self.calls = calls if calls is not None else []
        self.count = 0
        self.fired = threading.Event()

    def __call__(self):
        self.count += 1
        self.calls.append(self.name)
        self.fired.set()


class PlainHasher:
    """Hasher storing passwords as ``plain:<password>``."""

    def verify(self, password: str, hash: str) -> bool:
        return hash == f"plain:{password}"

    def generate(self, password: str) -> str:
        return f"plain:{password}"


@pytest.fixture
def users_path(tmp_path) -> Path:
    """Location of the users file inside a fresh directory."""
    return tmp_path / "users"


@pytest.fixture
def write_users(users_path) -> Callable[[str], Path]:
    """Write raw content to the users file."""

    def _write(content: str) -> Path:
        users_path.write_text(content, encoding="utf-8")
        return users_path

    return _write


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def plain_hasher() -> PlainHasher:
    return PlainHasher()


# =============================================================================
# Test Markers Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: Tests using a real filesystem watcher"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take a long time to run"
    )
