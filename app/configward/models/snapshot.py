"""Config snapshot models.

A snapshot is the result of reading and validating the primary config
file at one point in time.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from configward.models.config import PlatformConfig

ROOT_ISSUE_PATH = "<root>"


@dataclass(frozen=True, slots=True)
class ConfigIssue:
    """A single problem found in a config document.

    Attributes:
        path: Dotted location of the problem (empty for the document root).
        message: Human-readable description.
    """

    path: str
    message: str

    def format(self) -> str:
        """Render as a bullet line, naming the root explicitly."""
        return f"- {self.path or ROOT_ISSUE_PATH}: {self.message}"


@dataclass(frozen=True, slots=True)
class ConfigSnapshot:
    """Primary config file state as seen by one read.

    ``exists=False`` is distinct from invalid: a missing file is never
    recovered or gated.

    Attributes:
        path: Primary config file path.
        exists: Whether the file was present.
        valid: Whether it exists, parses and passes schema validation.
        raw: File text, None when missing or unreadable.
        parsed: Parsed document, None when missing or unparseable.
        config: Typed config when valid.
        issues: Parse or schema problems.
        legacy_issues: Deprecated keys that the migration flow can rewrite.
    """

    path: Path
    exists: bool
    valid: bool
    raw: str | None = None
    parsed: Any = None
    config: PlatformConfig | None = None
    issues: tuple[ConfigIssue, ...] = field(default_factory=tuple)
    legacy_issues: tuple[ConfigIssue, ...] = field(default_factory=tuple)

    @property
    def invalid(self) -> bool:
        """True when the file exists but cannot be used."""
        return self.exists and not self.valid
