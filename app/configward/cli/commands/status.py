"""Status and health commands.

`configward status` summarizes the config file; `configward health`
reports the same check as an exit status for scripts.
"""

import typer
from rich.markup import escape

from configward.cli.gate import require_config_ready
from configward.core.paths import shorten_home_path
from configward.integrity.backups import list_existing_backups
from configward.utils.formatting import console, create_key_table, print_error, print_success

app = typer.Typer(
    name="status",
    help="Show config file status.",
    invoke_without_command=True,
)

health_app = typer.Typer(
    name="health",
    help="Exit non-zero when the config file is invalid.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def status(ctx: typer.Context) -> None:
    """Show path, validity and backup count of the config file."""
    gate = require_config_ready(ctx)
    snapshot = gate.read_snapshot()

    if not snapshot.exists:
        state = "[muted]missing[/]"
    elif snapshot.valid:
        state = "[success]valid[/]"
    else:
        state = "[error]invalid[/]"

    table = create_key_table("Config Status")
    table.add_row("Path", escape(shorten_home_path(snapshot.path)))
    table.add_row("State", state)
    table.add_row("Issues", str(len(snapshot.issues)))
    table.add_row("Legacy keys", str(len(snapshot.legacy_issues)))
    table.add_row("Backups", str(len(list_existing_backups(snapshot.path, gate.fs))))

    meta = snapshot.config.meta if snapshot.config is not None else None
    if meta is not None and meta.last_touched_at:
        table.add_row("Last written", escape(meta.last_touched_at))

    console.print(table)


@health_app.callback(invoke_without_command=True)
def health(ctx: typer.Context) -> None:
    """Report OK for a valid or absent config, fail otherwise."""
    gate = require_config_ready(ctx)
    snapshot = gate.read_snapshot()

    if snapshot.invalid:
        print_error("Config invalid.")
        raise typer.Exit(code=1)

    if snapshot.exists:
        print_success("Config OK.")
    else:
        print_success("Config OK (no config file, defaults in effect).")
