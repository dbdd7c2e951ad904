"""JSON5 text parsing for config files.

JSON5 tolerates comments and trailing commas, so hand-edited configs and
backups stay readable.
"""

from typing import Any

import json5

from configward.core.errors import ConfigParseError


def parse_config_text(raw: str) -> Any:
    """Parse config text.

    Args:
        raw: File contents.

    Returns:
        Parsed document (any JSON value).

    Raises:
        ConfigParseError: If the text is not valid JSON5.
    """
    try:
        return json5.loads(raw)
    except (ValueError, RecursionError) as e:
        raise ConfigParseError(f"Invalid JSON5 syntax: {e}") from e
