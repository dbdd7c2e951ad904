"""CLI commands for configward.

This package contains all subcommand implementations.
"""

from configward.cli.commands import backups, config, doctor, gateway, status

__all__ = ["backups", "config", "doctor", "gateway", "status"]
