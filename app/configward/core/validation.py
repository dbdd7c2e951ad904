"""Raw config validation.

Turns a parsed (untyped) document into either a typed PlatformConfig or a
list of structured issues. The same validator is used for the primary
file and for backup candidates.
"""

from dataclasses import dataclass
from typing import Literal

from pydantic import ValidationError

from configward.models.config import PlatformConfig
from configward.models.snapshot import ConfigIssue


@dataclass(frozen=True, slots=True)
class ValidationOk:
    """Document passed schema validation."""

    config: PlatformConfig
    ok: Literal[True] = True


@dataclass(frozen=True, slots=True)
class ValidationFailed:
    """Document failed schema validation."""

    issues: tuple[ConfigIssue, ...]
    ok: Literal[False] = False


ValidationResult = ValidationOk | ValidationFailed


def _issue_path(loc: tuple[int | str, ...]) -> str:
    """Render a pydantic error location as a dotted path."""
    parts: list[str] = []
    for part in loc:
        if isinstance(part, int):
            parts.append(f"[{part}]")
        elif parts:
            parts.append(f".{part}")
        else:
            parts.append(part)
    return "".join(parts)


def validate_config_object_raw(data: object) -> ValidationResult:
    """Validate a parsed config document against the platform schema.

    Args:
        data: Parsed JSON5 document.

    Returns:
        ValidationOk with the typed config, or ValidationFailed with issues.
    """
    if not isinstance(data, dict):
        kind = "null" if data is None else type(data).__name__
        return ValidationFailed(
            issues=(ConfigIssue(path="", message=f"Config must be an object, got {kind}"),)
        )

    try:
        return ValidationOk(config=PlatformConfig.model_validate(data))
    except ValidationError as e:
        issues = tuple(
            ConfigIssue(path=_issue_path(tuple(err["loc"])), message=err["msg"])
            for err in e.errors()
        )
        return ValidationFailed(issues=issues)
