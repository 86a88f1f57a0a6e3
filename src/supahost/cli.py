"""Root Typer application for the supahost CLI."""

from __future__ import annotations

import typer

from supahost.commands import deploy, inventory, nginx

app = typer.Typer(
    name="supahost",
    help="Provision self-hosted Supabase on remote servers over SSH.",
    no_args_is_help=True,
)

app.command(name="deploy")(deploy.deploy)
app.add_typer(inventory.app, name="inventory", help="Inspect and validate servers.json.")
app.add_typer(nginx.app, name="nginx", help="NGINX site config preview.")

if __name__ == "__main__":
    app()
