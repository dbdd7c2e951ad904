"""Unit tests for config file I/O.

Tests for snapshot reading and for guarded, validated, rotated writes.
"""

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from configward import __version__
from configward.core.config_io import (
    load_config_document,
    read_config_file_snapshot,
    write_config_file,
)
from configward.core.errors import (
    ConfigValidationError,
    ConfigWriteBlockedError,
    ConfigWriteError,
)
from configward.integrity.write_guard import WriteGuardCode


class TestReadConfigFileSnapshot:
    """Tests for read_config_file_snapshot function."""

    def test_missing_file(self, config_path: Path) -> None:
        """A missing file is reported as absent, not invalid."""
        snapshot = read_config_file_snapshot(config_path)

        assert snapshot.exists is False
        assert snapshot.valid is False
        assert snapshot.invalid is False
        assert snapshot.issues == ()

    def test_valid_file(self, config_path: Path, valid_config: dict[str, Any], write_json) -> None:
        """A valid file yields the parsed and typed config."""
        write_json(config_path, valid_config)

        snapshot = read_config_file_snapshot(config_path)

        assert snapshot.valid is True
        assert snapshot.invalid is False
        assert snapshot.parsed == valid_config
        assert snapshot.config is not None
        assert snapshot.raw is not None

    def test_parse_failure(self, config_path: Path, write_json) -> None:
        """Broken syntax yields one root issue and keeps the raw text."""
        write_json(config_path, "{ broken")

        snapshot = read_config_file_snapshot(config_path)

        assert snapshot.invalid is True
        assert snapshot.raw == "{ broken"
        assert snapshot.parsed is None
        assert len(snapshot.issues) == 1
        assert snapshot.issues[0].path == ""
        assert snapshot.issues[0].format().startswith("- <root>: Invalid JSON5 syntax")

    def test_deeply_nested_file(self, config_path: Path, write_json) -> None:
        """Nesting past the parser's recursion limit is a root issue."""
        write_json(config_path, "{" + '"a":{' * 5000 + "}" * 5001)

        snapshot = read_config_file_snapshot(config_path)

        assert snapshot.invalid is True
        assert snapshot.parsed is None
        assert snapshot.issues[0].format().startswith("- <root>: Invalid JSON5 syntax")

    def test_schema_failure(self, config_path: Path, write_json) -> None:
        """Schema problems are listed with their paths."""
        write_json(config_path, {"gateway": {"port": "high"}})

        snapshot = read_config_file_snapshot(config_path)

        assert snapshot.invalid is True
        assert snapshot.parsed == {"gateway": {"port": "high"}}
        assert [issue.path for issue in snapshot.issues] == ["gateway.port"]

    def test_unreadable_bytes(self, config_path: Path) -> None:
        """Bytes that are not UTF-8 are reported as a read failure."""
        config_path.parent.mkdir(parents=True)
        config_path.write_bytes(b"\xff\xfe\x00")

        snapshot = read_config_file_snapshot(config_path)

        assert snapshot.invalid is True
        assert snapshot.issues[0].message.startswith("Failed to read config")

    def test_legacy_keys_reported(self, config_path: Path, write_json) -> None:
        """Legacy keys show up next to the schema issues."""
        write_json(config_path, {"routing": {}})

        snapshot = read_config_file_snapshot(config_path)

        assert snapshot.invalid is True
        assert [issue.path for issue in snapshot.legacy_issues] == ["routing"]


class TestLoadConfigDocument:
    """Tests for load_config_document function."""

    def test_returns_parsed_object(self, config_path: Path, write_json) -> None:
        """Objects are returned even when they fail the schema."""
        write_json(config_path, {"bogus": 1})
        assert load_config_document(config_path) == {"bogus": 1}

    def test_missing_or_non_object(self, config_path: Path, write_json) -> None:
        """Missing files and non-object documents yield None."""
        assert load_config_document(config_path) is None
        write_json(config_path, "[1]")
        assert load_config_document(config_path) is None


class TestWriteConfigFile:
    """Tests for write_config_file function."""

    def _read(self, path: Path) -> dict[str, Any]:
        return json.loads(path.read_text(encoding="utf-8"))

    def test_creates_new_file(self, config_path: Path, valid_config: dict[str, Any]) -> None:
        """A first write creates the directory and the file."""
        result = write_config_file(config_path, valid_config)

        assert result.safe is True
        written = self._read(config_path)
        assert written["gateway"] == valid_config["gateway"]
        assert not Path(f"{config_path}.bak").exists()

    def test_stamps_meta(self, config_path: Path, valid_config: dict[str, Any]) -> None:
        """Every write records the writer version and time."""
        write_config_file(config_path, valid_config)

        meta = self._read(config_path)["meta"]
        assert meta["last_touched_version"] == __version__
        assert meta["last_touched_at"].endswith("+00:00")

    def test_does_not_mutate_document(
        self, config_path: Path, valid_config: dict[str, Any]
    ) -> None:
        """The caller's document is not stamped in place."""
        write_config_file(config_path, valid_config)
        assert "meta" not in valid_config

    def test_rotates_previous_file(
        self, config_path: Path, valid_config: dict[str, Any], write_json
    ) -> None:
        """The previous file ends up in the most recent backup slot."""
        write_json(config_path, valid_config)
        previous = config_path.read_text()
        updated = {**valid_config, "ui": {"theme": "dark"}}

        write_config_file(config_path, updated)

        assert Path(f"{config_path}.bak").read_text() == previous
        assert self._read(config_path)["ui"] == {"theme": "dark"}

    def test_uses_given_filesystem(
        self, config_path: Path, valid_config: dict[str, Any], write_json, recording_fs
    ) -> None:
        """Rotation and the final write both go through the capability."""
        write_json(config_path, valid_config)

        write_config_file(config_path, {**valid_config, "ui": {}}, fs=recording_fs)

        assert recording_fs.calls == [
            ("copy_file", config_path, Path(f"{config_path}.bak")),
            ("write_bytes", config_path, None),
        ]
        assert self._read(config_path)["ui"] == {}

    def test_blocks_destructive_write(
        self, config_path: Path, valid_config: dict[str, Any], write_json
    ) -> None:
        """A destructive write raises and leaves every file alone."""
        write_json(config_path, valid_config)
        before = config_path.read_text()

        with pytest.raises(ConfigWriteBlockedError) as exc_info:
            write_config_file(config_path, {"gateway": {"port": 1}}, source="test")

        assert str(exc_info.value).startswith("Config write blocked")
        codes = [v.code for v in exc_info.value.result.violations]
        assert WriteGuardCode.DROPPED_CRITICAL_KEYS in codes
        assert config_path.read_text() == before
        assert not Path(f"{config_path}.bak").exists()

    def test_force_allows_destructive_write(
        self, config_path: Path, valid_config: dict[str, Any], write_json
    ) -> None:
        """force=True bypasses the guard."""
        write_json(config_path, valid_config)

        write_config_file(config_path, {"gateway": {"port": 1}}, force=True)

        written = self._read(config_path)
        assert written["gateway"] == {"port": 1}
        assert "agents" not in written

    def test_rejects_invalid_document(self, config_path: Path) -> None:
        """Schema failures raise before anything is written."""
        with pytest.raises(ConfigValidationError) as exc_info:
            write_config_file(config_path, {"gateway": {"port": 0}})

        assert [issue.path for issue in exc_info.value.issues] == ["gateway.port"]
        assert not config_path.exists()

    def test_returns_warnings(
        self, config_path: Path, valid_config: dict[str, Any], write_json
    ) -> None:
        """Non-blocking warnings are returned to the caller."""
        write_json(config_path, {**valid_config, "ui": {}})

        result = write_config_file(config_path, valid_config)

        assert result.warnings == ("Config write will remove non-critical keys: ui",)

    def test_write_failure(self, config_path: Path, valid_config: dict[str, Any]) -> None:
        """OS errors during the replace become ConfigWriteError."""
        with (
            patch("configward.integrity.fs.os.replace", side_effect=OSError("disk full")),
            pytest.raises(ConfigWriteError, match="disk full"),
        ):
            write_config_file(config_path, valid_config)

        assert not config_path.exists()
        assert list(config_path.parent.glob("*.tmp")) == []

    def test_unwritable_directory(self, tmp_path: Path, valid_config: dict[str, Any]) -> None:
        """A parent directory that cannot be created becomes ConfigWriteError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("")

        with pytest.raises(ConfigWriteError, match="Cannot create config directory"):
            write_config_file(blocker / "config.json", valid_config)
