"""Config read and write commands.

Provides incremental `get`, `set` and `unset` commands plus a guarded
full-file `replace`. Every write goes through the write-integrity guard.
"""

import json
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.markup import escape

from configward.cli.gate import ConfigGate, require_config_ready
from configward.core.config_io import load_config_document, write_config_file
from configward.core.errors import (
    ConfigError,
    ConfigParseError,
    ConfigValidationError,
    ConfigWriteBlockedError,
)
from configward.core.keypath import get_value, has_value, set_value, unset_value
from configward.core.parser import parse_config_text
from configward.integrity.write_guard import WriteGuardResult
from configward.utils.formatting import (
    console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="Read and write config values.",
    no_args_is_help=True,
)


@app.command()
def get(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Dotted key, e.g. gateway.port.")],
) -> None:
    """Print the value at KEY as JSON."""
    gate = require_config_ready(ctx)
    document = load_config_document(gate.config_path, gate.fs) or {}

    try:
        found = has_value(document, key)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if not found:
        print_error(f"Config key not set: {key}")
        raise typer.Exit(code=1)

    console.print_json(json.dumps(get_value(document, key)))


@app.command("set")
def set_(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Dotted key, e.g. gateway.port.")],
    value: Annotated[str, typer.Argument(help="JSON5 value; bare words are strings.")],
) -> None:
    """Set KEY to VALUE, keeping the rest of the config."""
    gate = require_config_ready(ctx)
    document = load_config_document(gate.config_path, gate.fs) or {}

    try:
        set_value(document, key, _parse_value(value))
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    _write(gate, document, source="config set")
    print_success(f"Set {key}.")


@app.command()
def unset(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Dotted key, e.g. gateway.bind.")],
) -> None:
    """Remove KEY from the config."""
    gate = require_config_ready(ctx)
    document = load_config_document(gate.config_path, gate.fs)
    if document is None:
        print_info(f"Config key not set: {key}")
        return

    try:
        removed = unset_value(document, key)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if not removed:
        print_info(f"Config key not set: {key}")
        return

    _write(gate, document, source="config unset")
    print_success(f"Removed {key}.")


@app.command()
def replace(
    ctx: typer.Context,
    source_file: Annotated[
        Path,
        typer.Argument(help="JSON5 file holding the complete new config."),
    ],
    force: Annotated[
        bool,
        typer.Option("--force", help="Replace even if the write looks destructive."),
    ] = False,
) -> None:
    """Replace the whole config with the contents of SOURCE_FILE."""
    gate = require_config_ready(ctx)

    try:
        document = parse_config_text(source_file.read_text(encoding="utf-8"))
    except OSError as e:
        print_error(f"Cannot read {source_file}: {e}")
        raise typer.Exit(code=1) from e
    except ConfigParseError as e:
        print_error(f"{source_file}: {e}")
        raise typer.Exit(code=1) from e

    if not isinstance(document, dict):
        print_error(f"{source_file} must contain a JSON5 object.")
        raise typer.Exit(code=1)

    _write(gate, document, source="config replace", force=force)
    print_success(f"Replaced config from {source_file}.")


# === Private helper functions ===


def _parse_value(value: str) -> Any:
    """Parse a CLI value as JSON5, falling back to the raw string."""
    try:
        return parse_config_text(value)
    except ConfigParseError:
        return value


def _write(
    gate: ConfigGate, document: dict[str, Any], *, source: str, force: bool = False
) -> None:
    """Write the document, turning config errors into CLI errors."""
    try:
        result = write_config_file(
            gate.config_path, document, force=force, source=source, fs=gate.fs
        )
    except ConfigWriteBlockedError as e:
        print_error(str(e))
        print_info("Use 'configward config replace --force' to replace the config on purpose.")
        raise typer.Exit(code=1) from e
    except ConfigValidationError as e:
        print_error("Refusing to write an invalid config:")
        for issue in e.issues:
            console.print(f"  [error]{escape(issue.format())}[/]")
        raise typer.Exit(code=1) from e
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    _print_warnings(result)


def _print_warnings(result: WriteGuardResult) -> None:
    for warning in result.warnings:
        print_warning(warning)
