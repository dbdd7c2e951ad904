"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.logging import RichHandler

from configward import __version__
from configward.cli.commands import backups, config, doctor, gateway, status
from configward.cli.gate import ConfigGate
from configward.utils.formatting import err_console

# Create main Typer app
app = typer.Typer(
    name="configward",
    help="Config integrity guard for the agent platform CLI.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"configward version {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool, quiet: bool) -> None:
    """Route log records to the stderr console."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False, show_time=False)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Config file to use (default: $CONFIGWARD_CONFIG_PATH or XDG location).",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
) -> None:
    """configward - keep the platform config file intact.

    Detects a corrupted config at startup, restores it from rotated
    backups, and blocks config writes that look like accidental overwrites.
    """
    _configure_logging(verbose, quiet)

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["gate"] = ConfigGate(config_path.expanduser() if config_path else None)


# Register commands
app.add_typer(doctor.app, name="doctor")
app.add_typer(status.app, name="status")
app.add_typer(status.health_app, name="health")
app.add_typer(config.app, name="config")
app.add_typer(backups.app, name="backups")
app.add_typer(gateway.app, name="gateway")


if __name__ == "__main__":
    app()
