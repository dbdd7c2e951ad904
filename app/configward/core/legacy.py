"""Legacy config key detection and rewriting.

Older platform releases wrote a few keys in places the current schema no
longer accepts. Each rule knows how to detect its key and how to move the
value to its current location.
"""

import copy
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from configward.models.snapshot import ConfigIssue

ConfigDict = dict[str, Any]


def _section(data: ConfigDict, key: str) -> ConfigDict:
    """Return data[key] as a dict, creating or replacing it if needed."""
    value = data.get(key)
    if not isinstance(value, dict):
        value = {}
        data[key] = value
    return value


def _has_agent(data: ConfigDict) -> bool:
    return "agent" in data


def _migrate_agent(data: ConfigDict) -> None:
    legacy = data.pop("agent")
    defaults = _section(_section(data, "agents"), "defaults")
    if isinstance(legacy, dict):
        for key, value in legacy.items():
            defaults.setdefault(key, value)


def _has_gateway_token(data: ConfigDict) -> bool:
    gateway = data.get("gateway")
    return isinstance(gateway, dict) and "token" in gateway


def _migrate_gateway_token(data: ConfigDict) -> None:
    gateway = _section(data, "gateway")
    token = gateway.pop("token")
    auth = _section(gateway, "auth")
    auth.setdefault("mode", "token")
    auth.setdefault("token", token)


def _has_routing(data: ConfigDict) -> bool:
    return "routing" in data


def _migrate_routing(data: ConfigDict) -> None:
    routing = data.pop("routing")
    _section(data, "messages").setdefault("routing", routing)


@dataclass(frozen=True, slots=True)
class LegacyConfigRule:
    """A deprecated key and how to rewrite it.

    Attributes:
        path: Dotted location of the deprecated key.
        message: Explanation shown to the user.
        matches: Predicate over the parsed document.
        migrate: In-place rewrite of the parsed document.
    """

    path: str
    message: str
    matches: Callable[[ConfigDict], bool]
    migrate: Callable[[ConfigDict], None]


LEGACY_CONFIG_RULES: tuple[LegacyConfigRule, ...] = (
    LegacyConfigRule(
        path="agent",
        message="'agent' was replaced by 'agents.defaults'",
        matches=_has_agent,
        migrate=_migrate_agent,
    ),
    LegacyConfigRule(
        path="gateway.token",
        message="'gateway.token' moved to 'gateway.auth.token'",
        matches=_has_gateway_token,
        migrate=_migrate_gateway_token,
    ),
    LegacyConfigRule(
        path="routing",
        message="'routing' moved to 'messages.routing'",
        matches=_has_routing,
        migrate=_migrate_routing,
    ),
)


def find_legacy_config_issues(data: object) -> list[ConfigIssue]:
    """List deprecated keys present in a parsed config document.

    Args:
        data: Parsed config document of any shape.

    Returns:
        One issue per matching rule, in rule order.
    """
    if not isinstance(data, dict):
        return []
    return [
        ConfigIssue(path=rule.path, message=rule.message)
        for rule in LEGACY_CONFIG_RULES
        if rule.matches(data)
    ]


def apply_legacy_migrations(data: ConfigDict) -> tuple[ConfigDict, list[str]]:
    """Rewrite every deprecated key in a copy of the document.

    Args:
        data: Parsed config document.

    Returns:
        Tuple of (migrated copy, messages of the rules that were applied).
    """
    migrated = copy.deepcopy(data)
    applied: list[str] = []
    for rule in LEGACY_CONFIG_RULES:
        if rule.matches(migrated):
            rule.migrate(migrated)
            applied.append(rule.message)
    return migrated, applied
