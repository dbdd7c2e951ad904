"""Gateway commands.

Only `status` is provided here; it reports the configured gateway section
and stays usable when the config file is broken.
"""

import typer
from rich.markup import escape

from configward.cli.gate import require_config_ready
from configward.utils.formatting import console, create_key_table, print_info, print_warning

app = typer.Typer(
    help="Inspect the gateway configuration.",
    no_args_is_help=True,
)


@app.command()
def status(ctx: typer.Context) -> None:
    """Show the configured gateway mode, port and auth mode."""
    gate = require_config_ready(ctx)
    snapshot = gate.read_snapshot()

    if snapshot.invalid:
        print_warning("Config is invalid; gateway settings cannot be read.")
        return

    gateway = snapshot.config.gateway if snapshot.config is not None else None
    if gateway is None:
        print_info("No gateway configured.")
        return

    table = create_key_table("Gateway")
    table.add_row("Mode", gateway.mode)
    table.add_row("Port", str(gateway.port))
    table.add_row("Bind", escape(gateway.bind or "-"))
    table.add_row("Auth", gateway.auth.mode if gateway.auth is not None else "-")
    console.print(table)
