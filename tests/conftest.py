"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import json
import os
from collections.abc import Iterator
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from configward.integrity.fs import LocalFileSystem


@pytest.fixture(autouse=True)
def isolated_config_env(tmp_path: Path) -> Iterator[None]:
    """Keep every test away from the real ~/.config."""
    env = {"XDG_CONFIG_HOME": str(tmp_path / "xdg")}
    with patch.dict(os.environ, env):
        os.environ.pop("CONFIGWARD_CONFIG_PATH", None)
        os.environ.pop("CONFIGWARD_NO_SNAPSHOT_CACHE", None)
        yield


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    """Primary config file location inside the test directory."""
    return tmp_path / "platform" / "config.json"


@pytest.fixture
def valid_config() -> dict[str, Any]:
    """A small config that passes schema validation."""
    return {
        "agents": {"list": [{"id": "main", "model": "sonnet"}], "defaults": {}},
        "gateway": {"mode": "local", "port": 18789},
        "models": {"default": "sonnet"},
        "channels": {"cli": {"enabled": True}},
    }


@pytest.fixture
def write_json():
    """Write a document (or raw text) to a path, creating parent dirs."""

    def _write(path: Path, content: Any) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        text = content if isinstance(content, str) else json.dumps(content, indent=2)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


class RecordingFileSystem(LocalFileSystem):
    """LocalFileSystem that records every mutating call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Path, Path | None]] = []

    def write_bytes(self, path: Path, data: bytes) -> None:
        self.calls.append(("write_bytes", path, None))
        super().write_bytes(path, data)

    def copy_file(self, source: Path, dest: Path) -> None:
        self.calls.append(("copy_file", source, dest))
        super().copy_file(source, dest)

    def rename(self, source: Path, dest: Path) -> None:
        self.calls.append(("rename", source, dest))
        super().rename(source, dest)


@pytest.fixture
def recording_fs() -> RecordingFileSystem:
    """Filesystem capability that records writes, copies and renames."""
    return RecordingFileSystem()
