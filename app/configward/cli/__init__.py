"""CLI package for configward.

This package contains the Typer application, the startup gate and all
subcommands.
"""

from configward.cli.main import app

__all__ = ["app"]
