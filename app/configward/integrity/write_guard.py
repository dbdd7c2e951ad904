"""Write-integrity guard for full config replacements.

Compares the current config document with a proposed replacement and
flags writes that look like accidental overwrites:

1. Dropping critical top-level keys that were present before
2. Losing more than 60% of the top-level keys
3. Shrinking the serialized config by more than 70% (non-trivial configs only)

Violations are returned as data; callers decide whether to block.
"""

import json
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# Top-level sections whose disappearance between writes is treated as
# destructive. New sections must be added here explicitly.
CRITICAL_TOP_LEVEL_KEYS: tuple[str, ...] = (
    "agents",
    "gateway",
    "models",
    "channels",
    "auth",
    "plugins",
    "tools",
    "skills",
    "session",
    "messages",
    "commands",
)

# Bookkeeping key that may disappear without a warning
META_KEY = "meta"

MIN_KEYS_FOR_RETENTION_CHECK = 3
MIN_RETENTION_RATIO = 0.4
MIN_SIZE_FOR_SHRINK_CHECK = 512
MIN_SIZE_RATIO = 0.3

PATCH_HINT = "configward config set"


class WriteGuardCode(str, Enum):
    """Kinds of destructive-overwrite conditions."""

    DROPPED_CRITICAL_KEYS = "dropped-critical-keys"
    EXCESSIVE_KEY_LOSS = "excessive-key-loss"
    EXCESSIVE_SIZE_DROP = "excessive-size-drop"


@dataclass(frozen=True, slots=True)
class WriteGuardViolation:
    """One detected destructive-overwrite condition.

    Attributes:
        code: Which heuristic fired.
        message: User-facing explanation.
        details: Structured numbers or keys behind the message.
    """

    code: WriteGuardCode
    message: str
    details: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class WriteGuardResult:
    """Outcome of one guard check.

    Attributes:
        safe: False when at least one violation was found.
        violations: Violations in heuristic order.
        warnings: Non-blocking notes.
    """

    safe: bool
    violations: tuple[WriteGuardViolation, ...] = field(default_factory=tuple)
    warnings: tuple[str, ...] = field(default_factory=tuple)


def _serialized_size(value: dict[str, Any]) -> int:
    """Length of the compact JSON rendering of value."""
    return len(json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str))


def validate_config_write_integrity(
    current: object,
    proposed: object,
    *,
    force: bool = False,
    source: str | None = None,
) -> WriteGuardResult:
    """Check whether replacing current with proposed is structurally safe.

    Only plain mappings are evaluated. If either side is anything else
    (missing, list, scalar) the write is reported safe.

    Args:
        current: Config document on disk.
        proposed: Config document about to be written.
        force: Skip every check (intentional full replacement).
        source: Label of the writer, appended to violation messages.

    Returns:
        WriteGuardResult with all violations and warnings collected.
    """
    if force:
        return WriteGuardResult(safe=True)

    if not isinstance(current, dict) or not isinstance(proposed, dict):
        return WriteGuardResult(safe=True)

    current_keys = list(current)
    proposed_keys = set(proposed)
    source_label = f" (source: {source})" if source else ""
    violations: list[WriteGuardViolation] = []
    warnings: list[str] = []

    dropped_critical = [
        key for key in CRITICAL_TOP_LEVEL_KEYS if key in current and key not in proposed_keys
    ]
    if dropped_critical:
        violations.append(
            WriteGuardViolation(
                code=WriteGuardCode.DROPPED_CRITICAL_KEYS,
                message=(
                    "Config write would remove critical top-level keys: "
                    f"{', '.join(dropped_critical)}{source_label}. "
                    f"Use '{PATCH_HINT}' for partial updates instead of replacing "
                    "the entire config."
                ),
                details={"dropped_keys": dropped_critical},
            )
        )

    if len(current_keys) >= MIN_KEYS_FOR_RETENTION_CHECK:
        retained = sum(1 for key in current_keys if key in proposed_keys)
        retention_ratio = retained / len(current_keys)
        if retention_ratio < MIN_RETENTION_RATIO:
            violations.append(
                WriteGuardViolation(
                    code=WriteGuardCode.EXCESSIVE_KEY_LOSS,
                    message=(
                        f"Config write would drop {len(current_keys) - retained} of "
                        f"{len(current_keys)} top-level keys{source_label}. "
                        f"This looks like an accidental overwrite. Use '{PATCH_HINT}' "
                        "for partial updates."
                    ),
                    details={
                        "current_key_count": len(current_keys),
                        "retained_key_count": retained,
                        "retention_ratio": retention_ratio,
                    },
                )
            )

    current_size = _serialized_size(current)
    proposed_size = _serialized_size(proposed)
    if current_size >= MIN_SIZE_FOR_SHRINK_CHECK and proposed_size < current_size * MIN_SIZE_RATIO:
        violations.append(
            WriteGuardViolation(
                code=WriteGuardCode.EXCESSIVE_SIZE_DROP,
                message=(
                    f"Config write would shrink config from {current_size} to "
                    f"{proposed_size} bytes{source_label}. "
                    "This looks like an accidental overwrite."
                ),
                details={"previous_size": current_size, "proposed_size": proposed_size},
            )
        )

    dropped_other = [
        key
        for key in current_keys
        if key not in CRITICAL_TOP_LEVEL_KEYS and key != META_KEY and key not in proposed_keys
    ]
    if dropped_other:
        warnings.append(f"Config write will remove non-critical keys: {', '.join(dropped_other)}")

    return WriteGuardResult(
        safe=not violations, violations=tuple(violations), warnings=tuple(warnings)
    )


def format_write_guard_error(violations: Sequence[WriteGuardViolation]) -> str:
    """Render violations as a single message.

    Args:
        violations: Violations from an unsafe guard result.

    Returns:
        Empty string for no violations; one line for a single violation;
        a counted header plus one bullet per violation otherwise.
    """
    if not violations:
        return ""
    if len(violations) == 1:
        return f"Config write blocked: {violations[0].message}"
    details = "\n".join(f"- {v.message}" for v in violations)
    return f"Config write blocked ({len(violations)} violations):\n{details}"
