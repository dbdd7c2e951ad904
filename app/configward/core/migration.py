"""One-time legacy config migration.

Run by the startup gate before the first command that may write state.
Deprecated keys are rewritten in place; anything that needs a decision
is put to the ``confirm`` callback, which non-interactive runs answer
with False.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from configward.core.config_io import load_config_document, write_config_file
from configward.core.errors import ConfigError
from configward.core.legacy import apply_legacy_migrations
from configward.integrity.fs import ConfigFileSystem
from configward.models.config import PlatformConfig

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]

# Commands that only read config; running them must not rewrite the file.
_READ_ONLY_PATHS: frozenset[tuple[str, ...]] = frozenset(
    {
        ("health",),
        ("status",),
        ("config", "get"),
        ("config", "unset"),
        ("backups", "list"),
        ("gateway", "status"),
        ("gateway", "probe"),
    }
)


def should_migrate_state_from_path(command_path: list[str]) -> bool:
    """Decide whether a command may trigger the legacy migration.

    Args:
        command_path: Resolved command path, e.g. ["config", "set"].

    Returns:
        False for read-only commands, True otherwise.
    """
    if not command_path:
        return True
    primary = tuple(command_path[:1])
    pair = tuple(command_path[:2])
    return primary not in _READ_ONLY_PATHS and pair not in _READ_ONLY_PATHS


@dataclass(slots=True)
class MigrationOutcome:
    """What a migration run did.

    Attributes:
        changed: Whether the config file was rewritten.
        applied: Messages of the legacy rules that were applied.
        dropped_keys: Unknown top-level keys removed after confirmation.
        error: Why the migrated config could not be written, if it could not.
    """

    changed: bool = False
    applied: list[str] = field(default_factory=list)
    dropped_keys: list[str] = field(default_factory=list)
    error: str | None = None


def migrate_legacy_config(
    path: Path,
    *,
    non_interactive: bool,
    confirm: Confirm,
    fs: ConfigFileSystem | None = None,
) -> MigrationOutcome:
    """Rewrite deprecated keys in the config file.

    Missing or unparseable files are left alone; recovery handles those.

    Args:
        path: Primary config file path.
        non_interactive: Skip steps that need a decision from the user.
        confirm: Yes/no prompt for optional steps.
        fs: Filesystem capability. Default: the local disk.

    Returns:
        MigrationOutcome describing the changes.
    """
    outcome = MigrationOutcome()
    document = load_config_document(path, fs)
    if document is None:
        return outcome

    migrated, applied = apply_legacy_migrations(document)
    outcome.applied = applied

    unknown = [key for key in migrated if key not in PlatformConfig.model_fields]
    if unknown and not non_interactive:
        if confirm(f"Remove unknown top-level keys: {', '.join(unknown)}?"):
            for key in unknown:
                migrated.pop(key)
            outcome.dropped_keys = unknown

    if not applied and not outcome.dropped_keys:
        return outcome

    try:
        write_config_file(path, migrated, source="migration", fs=fs)
    except ConfigError as e:
        logger.warning("Legacy config migration not written: %s", e)
        outcome.error = str(e)
        return outcome

    outcome.changed = True
    for message in applied:
        logger.info("Migrated legacy config key: %s", message)
    return outcome
