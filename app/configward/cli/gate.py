"""Startup gate: config validity check before a command runs.

Every command calls :func:`require_config_ready` first. The gate reads
the config snapshot, tries backup recovery when the file is broken, prints
diagnostics, and halts with exit status 1 unless the command is one of
the diagnostic commands that can work with a broken config.

Gate state (cached snapshot, migration flag) lives on a ConfigGate
instance rather than in module globals, so independent invocations in one
process do not share it.
"""

import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from configward.core.config_io import read_config_file_snapshot
from configward.core.migration import migrate_legacy_config, should_migrate_state_from_path
from configward.core.paths import get_config_path, get_quarantine_path, shorten_home_path
from configward.integrity.fs import ConfigFileSystem, LocalFileSystem
from configward.integrity.recovery import try_recover_config_from_backup
from configward.models.snapshot import ConfigSnapshot
from configward.utils.formatting import err_console, format_cli_command

logger = logging.getLogger(__name__)

ALLOWED_INVALID_COMMANDS = frozenset({"doctor", "logs", "health", "help", "status"})
ALLOWED_INVALID_GATEWAY_SUBCOMMANDS = frozenset(
    {
        "status",
        "probe",
        "health",
        "discover",
        "call",
        "install",
        "uninstall",
        "start",
        "stop",
        "restart",
    }
)

NO_CACHE_ENV = "CONFIGWARD_NO_SNAPSHOT_CACHE"
REPAIR_COMMAND = "configward doctor --fix"


def _halt(code: int) -> NoReturn:
    raise typer.Exit(code=code)


def snapshot_cache_disabled() -> bool:
    """Return True under a test runner or when the opt-out flag is set."""
    return "PYTEST_CURRENT_TEST" in os.environ or os.environ.get(NO_CACHE_ENV) == "1"


def is_allowed_with_invalid_config(command_path: list[str]) -> bool:
    """Return True if the command may run although the config is broken."""
    if not command_path:
        return False
    command = command_path[0]
    if command in ALLOWED_INVALID_COMMANDS:
        return True
    return (
        command == "gateway"
        and len(command_path) > 1
        and command_path[1] in ALLOWED_INVALID_GATEWAY_SUBCOMMANDS
    )


class ConfigGate:
    """Per-invocation startup gate.

    Attributes:
        config_path: Primary config file path.
        migration_ran: Whether the legacy migration already ran.
        fs: Filesystem capability shared with the commands it guards.
    """

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        fs: ConfigFileSystem | None = None,
        console: Console | None = None,
        exit: Callable[[int], NoReturn] = _halt,
        cache_snapshot: bool | None = None,
    ) -> None:
        """Initialize the gate.

        Args:
            config_path: Config file to guard. Default: get_config_path().
            fs: Filesystem capability for reads, migration and recovery.
            console: Where diagnostics go. Default: the stderr console.
            exit: Called with the exit status when a command must not run.
            cache_snapshot: Force snapshot caching on or off. Default: on,
                except under a test runner.
        """
        self.config_path = config_path or get_config_path()
        self.migration_ran = False
        self.fs = fs or LocalFileSystem()
        self._console = console or err_console
        self._exit = exit
        self._cache_snapshot = cache_snapshot
        self._snapshot: ConfigSnapshot | None = None

    def _caching(self) -> bool:
        if self._cache_snapshot is not None:
            return self._cache_snapshot
        return not snapshot_cache_disabled()

    def read_snapshot(self) -> ConfigSnapshot:
        """Return the config snapshot, reading it on first use."""
        if not self._caching():
            return read_config_file_snapshot(self.config_path, self.fs)
        if self._snapshot is None:
            self._snapshot = read_config_file_snapshot(self.config_path, self.fs)
        return self._snapshot

    def invalidate(self) -> None:
        """Drop the cached snapshot so the next read sees the file on disk."""
        self._snapshot = None

    def ensure_config_ready(self, command_path: list[str]) -> None:
        """Make sure the config is usable before a command runs.

        Args:
            command_path: Resolved command path, e.g. ["gateway", "status"].
        """
        if not self.migration_ran and should_migrate_state_from_path(command_path):
            self.migration_ran = True
            outcome = migrate_legacy_config(
                self.config_path, non_interactive=True, confirm=lambda _: False, fs=self.fs
            )
            if outcome.changed:
                self.invalidate()

        snapshot = self.read_snapshot()
        if not snapshot.invalid:
            return

        recovery = try_recover_config_from_backup(snapshot.path, self.fs)
        if recovery.recovered:
            self._print_recovered(snapshot.path, recovery.candidate.label)
            self.invalidate()
            return

        self._print_invalid(snapshot, recovery.backups_checked)
        if not is_allowed_with_invalid_config(command_path):
            self._exit(1)

    def _print_recovered(self, path: Path, label: str) -> None:
        quarantine = escape(shorten_home_path(get_quarantine_path(path)))
        command = escape(format_cli_command(REPAIR_COMMAND))
        out = self._console
        out.print("[heading]Config was invalid; automatically restored from backup[/]")
        out.print(f"[muted]Restored from:[/] [muted]{escape(label)}[/]")
        out.print(f"[muted]The corrupted config was saved to:[/] [muted]{quarantine}[/]")
        out.print(f"[muted]Run[/] [command]{command}[/] [muted]to review.[/]")

    def _print_invalid(self, snapshot: ConfigSnapshot, backups_checked: int) -> None:
        command = escape(format_cli_command(REPAIR_COMMAND))
        out = self._console
        out.print("[heading]Config invalid[/]")
        out.print(f"[muted]File:[/] [muted]{escape(shorten_home_path(snapshot.path))}[/]")
        if snapshot.issues:
            out.print("[muted]Problem:[/]")
            for issue in snapshot.issues:
                out.print(f"  [error]{escape(issue.format())}[/]")
        if snapshot.legacy_issues:
            out.print("[muted]Legacy config keys detected:[/]")
            for issue in snapshot.legacy_issues:
                out.print(f"  [error]{escape(issue.format())}[/]")
        if backups_checked > 0:
            out.print(f"[muted]Checked {backups_checked} backup(s) but none were valid.[/]")
        else:
            out.print("[muted]No backup files available for recovery.[/]")
        out.print("")
        out.print(f"[muted]Run:[/] [command]{command}[/]")


def resolve_command_path(ctx: typer.Context) -> list[str]:
    """Build the command path (without the program name) from a Click context."""
    names: list[str] = []
    current = ctx
    while current.parent is not None:
        if current.info_name:
            names.append(current.info_name)
        current = current.parent
    names.reverse()
    return names


def get_gate(ctx: typer.Context) -> ConfigGate:
    """Return the invocation's gate, creating one if the root has none."""
    root = ctx.find_root()
    root.ensure_object(dict)
    gate = root.obj.get("gate")
    if gate is None:
        gate = ConfigGate()
        root.obj["gate"] = gate
    return gate


def require_config_ready(ctx: typer.Context) -> ConfigGate:
    """Run the startup gate for the command being invoked.

    Returns:
        The gate, for commands that want its snapshot.

    Raises:
        typer.Exit: If the config is broken and the command is not allowed to run.
    """
    gate = get_gate(ctx)
    command_path = resolve_command_path(ctx)
    logger.debug("Checking config for command %s", " ".join(command_path))
    gate.ensure_config_ready(command_path)
    return gate
