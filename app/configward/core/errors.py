"""Exception hierarchy for config reading and writing."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from configward.integrity.write_guard import WriteGuardResult
    from configward.models.snapshot import ConfigIssue


class ConfigError(Exception):
    """Base exception for config-related errors."""


class ConfigParseError(ConfigError, ValueError):
    """Raised when config text is not valid JSON5."""


class ConfigWriteError(ConfigError):
    """Raised when the config file cannot be written."""


class ConfigWriteBlockedError(ConfigError):
    """Raised when the write-integrity guard rejects a config write.

    Attributes:
        path: Config file that was not written.
        result: The unsafe guard result, with violations and warnings.
    """

    def __init__(self, path: Path, result: WriteGuardResult, message: str) -> None:
        super().__init__(message)
        self.path = path
        self.result = result


class ConfigValidationError(ConfigError):
    """Raised when a config about to be written fails schema validation.

    Attributes:
        issues: Schema problems found in the rejected document.
    """

    def __init__(self, issues: tuple[ConfigIssue, ...], message: str) -> None:
        super().__init__(message)
        self.issues = issues
