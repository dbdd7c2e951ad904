"""Backup rotation slots for the primary config file.

Slots are ordered newest first: ``<path>.bak`` followed by
``<path>.bak.1`` through ``<path>.bak.<CONFIG_BACKUP_COUNT - 1>``.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from configward.core.paths import CONFIG_BACKUP_COUNT, get_backup_path
from configward.integrity.fs import ConfigFileSystem

logger = logging.getLogger(__name__)

MOST_RECENT_LABEL = ".bak (most recent)"


@dataclass(frozen=True, slots=True)
class BackupCandidate:
    """One rotation slot of a backup file.

    Attributes:
        path: Backup file path.
        label: Human-readable slot name used in diagnostics.
    """

    path: Path
    label: str


def build_backup_candidates(
    config_path: Path, count: int = CONFIG_BACKUP_COUNT
) -> list[BackupCandidate]:
    """List backup slots for a config path, most recent first.

    Pure computation: nothing is read from disk.

    Args:
        config_path: Primary config file path.
        count: Number of rotation slots.

    Returns:
        Candidates in rotation order.
    """
    candidates = [BackupCandidate(path=get_backup_path(config_path, 0), label=MOST_RECENT_LABEL)]
    for slot in range(1, count):
        candidates.append(
            BackupCandidate(path=get_backup_path(config_path, slot), label=f".bak.{slot}")
        )
    return candidates


def list_existing_backups(
    config_path: Path, fs: ConfigFileSystem, count: int = CONFIG_BACKUP_COUNT
) -> list[BackupCandidate]:
    """Return the rotation slots that currently hold a file."""
    return [c for c in build_backup_candidates(config_path, count) if fs.exists(c.path)]


def rotate_config_backups(
    config_path: Path, fs: ConfigFileSystem, count: int = CONFIG_BACKUP_COUNT
) -> bool:
    """Shift backup slots by one and copy the live config into ``.bak``.

    The oldest slot is overwritten. Rotation is best effort: a failed step
    is logged and the remaining steps still run.

    Args:
        config_path: Primary config file path.
        fs: Filesystem capability.
        count: Number of rotation slots.

    Returns:
        True if the live config was copied into the most recent slot.
    """
    if not fs.exists(config_path):
        return False

    for slot in range(count - 1, 0, -1):
        source = get_backup_path(config_path, slot - 1)
        if not fs.exists(source):
            continue
        try:
            fs.rename(source, get_backup_path(config_path, slot))
        except OSError as e:
            logger.warning("Could not rotate backup %s: %s", source, e)

    newest = get_backup_path(config_path, 0)
    try:
        fs.copy_file(config_path, newest)
    except OSError as e:
        logger.warning("Could not back up %s to %s: %s", config_path, newest, e)
        return False
    return True
