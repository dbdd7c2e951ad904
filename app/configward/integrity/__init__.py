"""Config integrity: backup recovery and write guarding.

This module provides the backup rotation slots, the recovery engine that
restores a broken config from them, and the write-integrity guard that
screens full config replacements.
"""

from configward.integrity.backups import (
    BackupCandidate,
    build_backup_candidates,
    list_existing_backups,
    rotate_config_backups,
)
from configward.integrity.fs import ConfigFileSystem, LocalFileSystem
from configward.integrity.recovery import (
    Recovered,
    RecoveryCandidate,
    RecoveryFailed,
    RecoveryResult,
    find_valid_backup,
    try_recover_config_from_backup,
)
from configward.integrity.write_guard import (
    CRITICAL_TOP_LEVEL_KEYS,
    WriteGuardCode,
    WriteGuardResult,
    WriteGuardViolation,
    format_write_guard_error,
    validate_config_write_integrity,
)

__all__ = [
    "CRITICAL_TOP_LEVEL_KEYS",
    "BackupCandidate",
    "ConfigFileSystem",
    "LocalFileSystem",
    "Recovered",
    "RecoveryCandidate",
    "RecoveryFailed",
    "RecoveryResult",
    "WriteGuardCode",
    "WriteGuardResult",
    "WriteGuardViolation",
    "build_backup_candidates",
    "find_valid_backup",
    "format_write_guard_error",
    "list_existing_backups",
    "rotate_config_backups",
    "try_recover_config_from_backup",
    "validate_config_write_integrity",
]
