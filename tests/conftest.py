"""
Pytest configuration and shared fixtures for methd tests.

This module provides reusable fixtures and test utilities used across
the test suite.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from methd.logging import SilentLogger, set_global_logger


class RecordingLogger:
    """Logger that keeps every message for later assertions."""

    def __init__(self) -> None:
        self.warnings: list[tuple[str, str]] = []
        self.verbose_messages: list[tuple[str, str]] = []
        self.debug_messages: list[tuple[str, str]] = []

    def warning(self, prefix: str, message: str) -> None:
        self.warnings.append((prefix, message))

    def verbose(self, prefix: str, message: str) -> None:
        self.verbose_messages.append((prefix, message))

    def debug(self, prefix: str, message: str) -> None:
        self.debug_messages.append((prefix, message))


@pytest.fixture(autouse=True)
def reset_global_logger():
    """Keep CLI tests from leaking a configured global logger."""
    yield
    set_global_logger(SilentLogger())


@pytest.fixture
def tmp_test_dir(tmp_path: Path) -> Path:
    """
    Provide a temporary directory for test artifacts.

    Automatically cleaned up after test completion.
    """
    return tmp_path


@pytest.fixture
def recording_logger() -> RecordingLogger:
    """Provide a logger that records messages instead of printing them."""
    return RecordingLogger()


@pytest.fixture
def sample_root_data() -> dict[str, Any]:
    """
    Provide a sample root configuration.

    Uses the default fragment directory (methd.d).
    """
    return {
        "daemon": {
            "endpoint": "a:1",
            "key_path": "/var/lib/methd/key",
        },
        "peers": {
            "p1": {"public_key": "X", "endpoint": "10.0.0.1:4040"},
        },
    }


@pytest.fixture
def create_yaml_file(tmp_test_dir: Path):
    """
    Factory fixture for creating temporary YAML files.

    Usage:
        yaml_path = create_yaml_file("methd.d/10-peers.yaml", {"peers": {}})
    """

    def _create(filename: str, data: dict[str, Any]) -> Path:
        path = tmp_test_dir / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(data, f)
        return path

    return _create


@pytest.fixture
def create_text_file(tmp_test_dir: Path):
    """Factory fixture for writing raw text (e.g. deliberately broken YAML)."""

    def _create(filename: str, text: str) -> Path:
        path = tmp_test_dir / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _create
