"""Dotted key paths into a config document.

``gateway.auth.mode`` addresses ``doc["gateway"]["auth"]["mode"]``.
These helpers back the incremental ``config get|set|unset`` commands.
"""

from typing import Any

_MISSING = object()


def split_key_path(key: str) -> list[str]:
    """Split a dotted key into its parts.

    Raises:
        ValueError: If the key is empty or has an empty segment.
    """
    parts = key.split(".")
    if not key or any(not part for part in parts):
        msg = f"Invalid config key: {key!r}"
        raise ValueError(msg)
    return parts


def get_value(document: dict[str, Any], key: str, default: Any = None) -> Any:
    """Return the value at a dotted key, or default if any segment is missing."""
    node: Any = document
    for part in split_key_path(key):
        if not isinstance(node, dict):
            return default
        node = node.get(part, _MISSING)
        if node is _MISSING:
            return default
    return node


def has_value(document: dict[str, Any], key: str) -> bool:
    """Return True if the dotted key resolves to a value."""
    return get_value(document, key, _MISSING) is not _MISSING


def set_value(document: dict[str, Any], key: str, value: Any) -> None:
    """Set the value at a dotted key, creating intermediate mappings.

    Raises:
        ValueError: If an intermediate segment holds a non-mapping value.
    """
    parts = split_key_path(key)
    node = document
    for index, part in enumerate(parts[:-1]):
        child = node.setdefault(part, {})
        if not isinstance(child, dict):
            prefix = ".".join(parts[: index + 1])
            msg = f"Cannot set {key}: {prefix} is not an object"
            raise ValueError(msg)
        node = child
    node[parts[-1]] = value


def unset_value(document: dict[str, Any], key: str) -> bool:
    """Remove the value at a dotted key.

    Returns:
        True if a value was removed, False if the key was not present.
    """
    parts = split_key_path(key)
    node: Any = document
    for part in parts[:-1]:
        node = node.get(part) if isinstance(node, dict) else None
        if node is None:
            return False
    if not isinstance(node, dict) or parts[-1] not in node:
        return False
    del node[parts[-1]]
    return True
