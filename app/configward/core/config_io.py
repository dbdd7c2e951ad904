"""Config file I/O operations.

This module reads the primary config file into a ConfigSnapshot and
writes new config documents through the write-integrity guard, with
backup rotation and an atomic replace.
"""

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from configward import __version__
from configward.core.errors import (
    ConfigParseError,
    ConfigValidationError,
    ConfigWriteBlockedError,
    ConfigWriteError,
)
from configward.core.legacy import find_legacy_config_issues
from configward.core.parser import parse_config_text
from configward.core.paths import ensure_parent_dir
from configward.core.validation import validate_config_object_raw
from configward.integrity.backups import rotate_config_backups
from configward.integrity.fs import ConfigFileSystem, LocalFileSystem, read_text
from configward.integrity.write_guard import (
    WriteGuardResult,
    format_write_guard_error,
    validate_config_write_integrity,
)
from configward.models.snapshot import ConfigIssue, ConfigSnapshot

logger = logging.getLogger(__name__)


def read_config_file_snapshot(path: Path, fs: ConfigFileSystem | None = None) -> ConfigSnapshot:
    """Read and validate the primary config file.

    Never raises for a missing, unreadable or malformed file; those
    conditions are reported on the snapshot.

    Args:
        path: Primary config file path.
        fs: Filesystem capability. Defaults to the local disk.

    Returns:
        ConfigSnapshot describing the file.
    """
    fs = fs or LocalFileSystem()

    if not fs.exists(path):
        return ConfigSnapshot(path=path, exists=False, valid=False)

    try:
        raw = read_text(fs, path)
    except (OSError, UnicodeDecodeError) as e:
        issue = ConfigIssue(path="", message=f"Failed to read config: {e}")
        return ConfigSnapshot(path=path, exists=True, valid=False, issues=(issue,))

    try:
        parsed = parse_config_text(raw)
    except ConfigParseError as e:
        issue = ConfigIssue(path="", message=str(e))
        return ConfigSnapshot(path=path, exists=True, valid=False, raw=raw, issues=(issue,))

    legacy_issues = tuple(find_legacy_config_issues(parsed))
    result = validate_config_object_raw(parsed)
    if not result.ok:
        return ConfigSnapshot(
            path=path,
            exists=True,
            valid=False,
            raw=raw,
            parsed=parsed,
            issues=result.issues,
            legacy_issues=legacy_issues,
        )

    return ConfigSnapshot(
        path=path,
        exists=True,
        valid=True,
        raw=raw,
        parsed=parsed,
        config=result.config,
        legacy_issues=legacy_issues,
    )


def load_config_document(
    path: Path, fs: ConfigFileSystem | None = None
) -> dict[str, Any] | None:
    """Load the parsed config document, or None if missing or unusable.

    Args:
        path: Primary config file path.
        fs: Filesystem capability. Default: the local disk.

    Returns:
        Parsed document when the file exists and holds a JSON5 object.
    """
    snapshot = read_config_file_snapshot(path, fs)
    if isinstance(snapshot.parsed, dict):
        return snapshot.parsed
    return None


def _stamp_meta(document: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of document with refreshed write bookkeeping."""
    meta = document.get("meta")
    stamped_meta = dict(meta) if isinstance(meta, dict) else {}
    stamped_meta["last_touched_version"] = __version__
    stamped_meta["last_touched_at"] = datetime.now(UTC).isoformat(timespec="seconds")
    return {**document, "meta": stamped_meta}


def write_config_file(
    path: Path,
    document: dict[str, Any],
    *,
    force: bool = False,
    source: str | None = None,
    fs: ConfigFileSystem | None = None,
) -> WriteGuardResult:
    """Write a full config document after guarding and validating it.

    Steps:
    1. Compare against the document currently on disk (write guard)
    2. Validate the stamped document against the schema
    3. Rotate backups so the previous file lands in ``.bak``
    4. Atomically replace the primary with the new document

    Args:
        path: Primary config file path.
        document: Complete new config document.
        force: Bypass the write guard for an intentional full replacement.
        source: Writer label used in guard messages.
        fs: Filesystem capability for the read, rotation and write.
            Default: the local disk.

    Returns:
        The (safe) guard result, carrying any non-blocking warnings.

    Raises:
        ConfigWriteBlockedError: If the guard flags the write as destructive.
        ConfigValidationError: If the document fails schema validation.
        ConfigWriteError: If the file cannot be written.
    """
    fs = fs or LocalFileSystem()
    current = load_config_document(path, fs)
    guard = validate_config_write_integrity(current, document, force=force, source=source)
    if not guard.safe:
        raise ConfigWriteBlockedError(path, guard, format_write_guard_error(guard.violations))
    for warning in guard.warnings:
        logger.debug("Write guard warning: %s", warning)

    stamped = _stamp_meta(document)
    validation = validate_config_object_raw(stamped)
    if not validation.ok:
        lines = "\n".join(issue.format() for issue in validation.issues)
        raise ConfigValidationError(validation.issues, f"Invalid config:\n{lines}")

    try:
        ensure_parent_dir(path)
    except RuntimeError as e:
        raise ConfigWriteError(str(e)) from e

    rotate_config_backups(path, fs)

    text = json.dumps(stamped, indent=2, ensure_ascii=False) + "\n"
    try:
        fs.write_bytes(path, text.encode("utf-8"))
    except OSError as e:
        raise ConfigWriteError(f"Failed to write config: {e}") from e

    logger.info("Wrote config %s", path)
    return guard
