"""Backup inspection and restore commands.

Provides `configward backups list` to show the rotation slots and
`configward backups restore` to run the recovery engine on demand.
"""

from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from configward.cli.gate import require_config_ready
from configward.core.paths import get_quarantine_path, shorten_home_path
from configward.integrity.backups import build_backup_candidates
from configward.integrity.recovery import load_backup_candidate, try_recover_config_from_backup
from configward.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Inspect and restore config backups.",
    no_args_is_help=True,
)


@app.command("list")
def list_backups(ctx: typer.Context) -> None:
    """Show every backup slot, newest first, with its validity."""
    gate = require_config_ready(ctx)
    fs = gate.fs

    table = Table(
        title="Config Backups",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Slot", no_wrap=True)
    table.add_column("Status", width=10)
    table.add_column("Path", style="muted")

    found = 0
    for candidate in build_backup_candidates(gate.config_path):
        if not fs.exists(candidate.path):
            continue
        found += 1
        if load_backup_candidate(candidate, fs) is not None:
            status = "[success]valid[/]"
        else:
            status = "[error]invalid[/]"
        table.add_row(
            escape(candidate.label), status, escape(shorten_home_path(candidate.path))
        )

    if not found:
        print_info("No backups found.")
        return

    console.print(table)


@app.command()
def restore(
    ctx: typer.Context,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Replace the config with the newest valid backup.

    The current config is kept as <config>.corrupted.
    """
    gate = require_config_ready(ctx)
    snapshot = gate.read_snapshot()

    if snapshot.valid and not yes:
        confirmed = typer.confirm(
            "The current config is valid. Replace it with the newest valid backup?",
            default=False,
        )
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    result = try_recover_config_from_backup(gate.config_path, gate.fs)
    if not result.recovered:
        print_error(
            f"Restore failed: {result.reason} ({result.backups_checked} backup(s) checked)."
        )
        raise typer.Exit(code=1)

    gate.invalidate()
    print_success(f"Restored config from {result.candidate.label}.")
    if snapshot.exists:
        quarantine = shorten_home_path(get_quarantine_path(gate.config_path))
        print_info(f"Previous config saved to {quarantine}")
