"""Doctor command for diagnosing and repairing the config file.

This module provides the `configward doctor` command, which reports the
state of the config file and its backups and, with --fix, migrates legacy
keys and restores a broken file from the newest valid backup.
"""

from typing import Annotated

import typer
from rich.markup import escape

from configward.cli.gate import require_config_ready
from configward.core.migration import migrate_legacy_config
from configward.core.paths import get_quarantine_path, shorten_home_path
from configward.integrity.backups import list_existing_backups
from configward.integrity.fs import ConfigFileSystem
from configward.integrity.recovery import find_valid_backup, try_recover_config_from_backup
from configward.models.snapshot import ConfigSnapshot
from configward.utils.formatting import console, print_info, print_success, print_warning

app = typer.Typer(
    name="doctor",
    help="Diagnose and repair the config file.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def doctor(
    ctx: typer.Context,
    fix: Annotated[
        bool,
        typer.Option(
            "--fix",
            help="Migrate legacy keys and restore from backup if needed.",
        ),
    ] = False,
    non_interactive: Annotated[
        bool,
        typer.Option(
            "--non-interactive",
            help="Never prompt; skip repairs that need confirmation.",
        ),
    ] = False,
) -> None:
    """Check the config file and, with --fix, repair it.

    Examples:
        configward doctor                    # Report only
        configward doctor --fix              # Migrate and recover
        configward doctor --fix --non-interactive
    """
    gate = require_config_ready(ctx)

    if fix:
        outcome = migrate_legacy_config(
            gate.config_path,
            non_interactive=non_interactive,
            confirm=lambda question: typer.confirm(question, default=False),
            fs=gate.fs,
        )
        if outcome.changed:
            for message in outcome.applied:
                print_success(f"Migrated: {message}")
            for key in outcome.dropped_keys:
                print_success(f"Removed unknown key: {key}")
        if outcome.error:
            print_warning(f"Migration not written: {outcome.error}")
        gate.invalidate()

        snapshot = gate.read_snapshot()
        if snapshot.invalid:
            recovery = try_recover_config_from_backup(snapshot.path, gate.fs)
            if recovery.recovered:
                quarantine = shorten_home_path(get_quarantine_path(snapshot.path))
                print_success(f"Restored config from {recovery.candidate.label}")
                print_info(f"The corrupted config was saved to {quarantine}")
                gate.invalidate()
            else:
                print_warning(f"Could not restore from backup: {recovery.reason}")

    snapshot = gate.read_snapshot()
    _print_report(snapshot, gate.fs)

    if snapshot.invalid:
        raise typer.Exit(code=1)


def _print_report(snapshot: ConfigSnapshot, fs: ConfigFileSystem) -> None:
    """Print the config and backup status."""
    console.print(f"[heading]Config:[/] {escape(shorten_home_path(snapshot.path))}")

    if not snapshot.exists:
        print_info("No config file yet. Defaults are in effect.")
    elif snapshot.valid:
        print_success("Config is valid.")
    else:
        console.print("[error]Config is invalid:[/]")
        for issue in snapshot.issues:
            console.print(f"  [error]{escape(issue.format())}[/]")

    if snapshot.legacy_issues:
        console.print("[warning]Legacy config keys detected:[/]")
        for issue in snapshot.legacy_issues:
            console.print(f"  [warning]{escape(issue.format())}[/]")
        print_info("Run 'configward doctor --fix' to migrate them.")

    backups = list_existing_backups(snapshot.path, fs)
    if not backups:
        console.print("[muted]No backups available.[/]")
        return

    newest_valid = find_valid_backup(snapshot.path, fs)
    console.print(f"[muted]{len(backups)} backup(s) available.[/]")
    if newest_valid is None:
        print_warning("None of the backups is valid.")
    else:
        console.print(f"[muted]Newest valid backup:[/] {escape(newest_valid.label)}")
