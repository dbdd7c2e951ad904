"""XDG-compliant path management for configward.

This module provides standardized paths for the platform config file and
the fixed naming convention of its rotated backups and quarantine file.

XDG defaults:
- Config: ~/.config/configward/config.json
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "configward"

# Environment variable that overrides the config file location
CONFIG_PATH_ENV = "CONFIGWARD_CONFIG_PATH"

CONFIG_FILENAME = "config.json"

# Number of rotation slots: .bak, .bak.1, ... .bak.<CONFIG_BACKUP_COUNT - 1>
CONFIG_BACKUP_COUNT = 5

BACKUP_SUFFIX = ".bak"
QUARANTINE_SUFFIX = ".corrupted"
STAGING_SUFFIX = ".restore.tmp"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/configward/ (or XDG_CONFIG_HOME/configward/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_config_path() -> Path:
    """Get the platform config file path.

    CONFIGWARD_CONFIG_PATH takes precedence over the XDG location.

    Returns:
        Path to the primary config file.
    """
    override = os.environ.get(CONFIG_PATH_ENV)
    if override:
        return Path(override).expanduser()
    return get_config_dir() / CONFIG_FILENAME


def get_backup_path(config_path: Path, slot: int) -> Path:
    """Get the path of one backup rotation slot.

    Slot 0 is ``<path>.bak``; slot ``i > 0`` is ``<path>.bak.<i>``.

    Args:
        config_path: Primary config file path.
        slot: Rotation slot index, 0 being the most recent.

    Returns:
        Path of the backup file for that slot.
    """
    if slot == 0:
        return Path(f"{config_path}{BACKUP_SUFFIX}")
    return Path(f"{config_path}{BACKUP_SUFFIX}.{slot}")


def get_quarantine_path(config_path: Path) -> Path:
    """Get the path a corrupted primary config is moved to during recovery."""
    return Path(f"{config_path}{QUARANTINE_SUFFIX}")


def get_staging_path(config_path: Path) -> Path:
    """Get the temporary path a backup is staged at before promotion."""
    return Path(f"{config_path}{STAGING_SUFFIX}")


def shorten_home_path(path: Path | str) -> str:
    """Replace the user's home directory prefix with ``~``.

    Args:
        path: Path to shorten.

    Returns:
        Display string, unchanged if the path is not under home.
    """
    text = str(path)
    home = str(Path.home())
    if home and home != "/" and (text == home or text.startswith(home + os.sep)):
        return "~" + text[len(home) :]
    return text


def _ensure_dir(path: Path, name: str) -> Path:
    """Create directory if it doesn't exist.

    Args:
        path: Directory path to create.
        name: Human-readable name for error messages.

    Returns:
        The created/existing directory path.

    Raises:
        RuntimeError: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path


def ensure_parent_dir(path: Path) -> Path:
    """Create the directory that will hold a config file.

    Args:
        path: Config file path.

    Returns:
        Path to the parent directory.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(path.parent, "config")
