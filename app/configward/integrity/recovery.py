"""Config recovery from rotated backups.

Scans the backup slots newest first, picks the first one that parses and
validates, moves the broken primary aside to ``<path>.corrupted`` and
promotes the backup into its place.

Failures are reported through RecoveryResult values. Nothing in this
module raises for an unusable backup or a failed restore.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from configward.core.parser import parse_config_text
from configward.core.paths import get_quarantine_path, get_staging_path
from configward.core.validation import validate_config_object_raw
from configward.integrity.backups import BackupCandidate, build_backup_candidates
from configward.integrity.fs import ConfigFileSystem, LocalFileSystem, read_text
from configward.models.config import PlatformConfig

logger = logging.getLogger(__name__)

Parser = Callable[[str], object]

NO_BACKUPS_REASON = "no backup files found"
ALL_INVALID_REASON = "all backup files are invalid or unreadable"


@dataclass(frozen=True, slots=True)
class RecoveryCandidate:
    """A backup that parsed and validated.

    Attributes:
        path: Backup file path.
        label: Rotation slot label.
        config: Validated config read from the backup.
    """

    path: Path
    label: str
    config: PlatformConfig


@dataclass(frozen=True, slots=True)
class Recovered:
    """The primary config was restored from a backup."""

    candidate: RecoveryCandidate
    backups_checked: int
    recovered: Literal[True] = True


@dataclass(frozen=True, slots=True)
class RecoveryFailed:
    """No backup could be restored; the primary file was left untouched."""

    backups_checked: int
    reason: str
    recovered: Literal[False] = False


RecoveryResult = Recovered | RecoveryFailed


def load_backup_candidate(
    candidate: BackupCandidate,
    fs: ConfigFileSystem,
    parse: Parser = parse_config_text,
) -> RecoveryCandidate | None:
    """Read, parse and validate one backup slot.

    Args:
        candidate: Slot to check.
        fs: Filesystem capability.
        parse: Text parser.

    Returns:
        RecoveryCandidate if usable, None if missing, unreadable, malformed
        or rejected by the schema.
    """
    if not fs.exists(candidate.path):
        return None

    try:
        parsed = parse(read_text(fs, candidate.path))
    except Exception as e:  # any parser failure makes the slot unusable
        logger.debug("Backup %s is unreadable: %s", candidate.path, e)
        return None

    result = validate_config_object_raw(parsed)
    if not result.ok:
        logger.debug(
            "Backup %s failed validation with %d issue(s)", candidate.path, len(result.issues)
        )
        return None

    return RecoveryCandidate(path=candidate.path, label=candidate.label, config=result.config)


def find_valid_backup(
    config_path: Path,
    fs: ConfigFileSystem | None = None,
    parse: Parser = parse_config_text,
) -> RecoveryCandidate | None:
    """Return the most recent usable backup without touching any file.

    Args:
        config_path: Primary config file path.
        fs: Filesystem capability. Defaults to the local disk.
        parse: Text parser.

    Returns:
        First valid candidate in rotation order, or None.
    """
    fs = fs or LocalFileSystem()
    for candidate in build_backup_candidates(config_path):
        recovery = load_backup_candidate(candidate, fs, parse)
        if recovery is not None:
            return recovery
    return None


def try_recover_config_from_backup(
    config_path: Path,
    fs: ConfigFileSystem | None = None,
    parse: Parser = parse_config_text,
) -> RecoveryResult:
    """Restore the primary config from the most recent usable backup.

    Every existing backup counts towards ``backups_checked``, whether or
    not it turns out to be usable.

    Args:
        config_path: Primary config file path.
        fs: Filesystem capability. Defaults to the local disk.
        parse: Text parser.

    Returns:
        Recovered with the promoted candidate, or RecoveryFailed with a reason.
    """
    fs = fs or LocalFileSystem()
    backups_checked = 0

    for candidate in build_backup_candidates(config_path):
        if not fs.exists(candidate.path):
            continue
        backups_checked += 1

        recovery = load_backup_candidate(candidate, fs, parse)
        if recovery is None:
            logger.debug("Skipping invalid backup %s", candidate.path)
            continue

        try:
            _promote_backup(config_path, candidate.path, fs)
        except OSError as e:
            logger.warning("Could not restore %s from %s: %s", config_path, candidate.path, e)
            continue

        logger.info("Restored %s from %s", config_path, candidate.path)
        return Recovered(candidate=recovery, backups_checked=backups_checked)

    reason = NO_BACKUPS_REASON if backups_checked == 0 else ALL_INVALID_REASON
    return RecoveryFailed(backups_checked=backups_checked, reason=reason)


def _promote_backup(config_path: Path, backup_path: Path, fs: ConfigFileSystem) -> None:
    """Swap a backup into the primary location.

    Steps:
    1. Stage a copy of the backup next to the primary and verify its bytes
    2. Move the primary aside to the quarantine path (rename, else copy)
    3. Rename the staged copy over the primary

    The primary is untouched until step 2. If step 3 fails after a rename
    quarantine, the quarantined file is moved back.

    Raises:
        OSError: If any step fails.
    """
    staging = get_staging_path(config_path)
    quarantine = get_quarantine_path(config_path)

    expected = fs.read_bytes(backup_path)
    try:
        fs.copy_file(backup_path, staging)
        if fs.read_bytes(staging) != expected:
            raise OSError(f"Staged copy of {backup_path} does not match the backup")

        moved_aside = _quarantine_primary(config_path, quarantine, fs)
        try:
            fs.rename(staging, config_path)
        except OSError:
            if moved_aside:
                _restore_quarantined(quarantine, config_path, fs)
            raise
    finally:
        _discard(staging, fs)


def _quarantine_primary(config_path: Path, quarantine: Path, fs: ConfigFileSystem) -> bool:
    """Preserve the current primary at the quarantine path.

    Returns:
        True if the primary was renamed away, False if it was copied or absent.

    Raises:
        OSError: If both rename and copy fail.
    """
    if not fs.exists(config_path):
        return False
    try:
        fs.rename(config_path, quarantine)
        return True
    except OSError as e:
        logger.debug("Rename to %s failed (%s), copying instead", quarantine, e)
    fs.copy_file(config_path, quarantine)
    return False


def _restore_quarantined(quarantine: Path, config_path: Path, fs: ConfigFileSystem) -> None:
    """Put a quarantined primary back after a failed promotion."""
    try:
        fs.rename(quarantine, config_path)
    except OSError as e:
        logger.warning(
            "Could not move %s back to %s; the original config is at %s: %s",
            quarantine,
            config_path,
            quarantine,
            e,
        )


def _discard(path: Path, fs: ConfigFileSystem) -> None:
    try:
        if fs.exists(path):
            fs.remove(path)
    except OSError as e:
        logger.warning("Could not remove staging file %s: %s", path, e)
