"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import os
import sys

from rich.console import Console
from rich.table import Table

from configward.core.paths import CONFIG_PATH_ENV
from configward.core.theme import get_theme

CLI_NAME = "configward"


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def format_cli_command(command: str) -> str:
    """Render a CLI invocation hint, honoring a custom config path.

    When CONFIGWARD_CONFIG_PATH is set the hint carries it along so that a
    copy-pasted command operates on the same file.

    Args:
        command: Command line starting with the CLI name.

    Returns:
        Command string suitable for display.
    """
    override = os.environ.get(CONFIG_PATH_ENV)
    if not override or not command.startswith(f"{CLI_NAME} "):
        return command
    return f"{CONFIG_PATH_ENV}={override} {command}"


def create_key_table(title: str) -> Table:
    """Create a pre-configured two-column table for key/value display.

    Args:
        title: Table title.

    Returns:
        Rich Table configured for key/value rows.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Key", no_wrap=True)
    table.add_column("Value", style="muted", overflow="fold")
    return table


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
