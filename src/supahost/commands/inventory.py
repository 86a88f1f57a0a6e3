"""Inventory inspection commands."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from supahost.commands._common import console, fail, resolve_config
from supahost.errors import SupahostError
from supahost.services.address import AddressKind, classify_address
from supahost.services.inventory import load_inventory
from supahost.services.template_renderer import load_templates

app = typer.Typer(no_args_is_help=True)


@app.command(name="list")
def list_servers(
    inventory: Optional[Path] = typer.Option(None, "--inventory", "-i", help="Path to servers.json"),
) -> None:
    """List servers with defaults applied."""
    cfg = resolve_config(inventory=inventory)
    try:
        servers = load_inventory(cfg.inventory_path)
    except SupahostError as exc:
        raise fail(exc)

    table = Table(title=f"Servers ({cfg.inventory_path})")
    table.add_column("Name", style="cyan")
    table.add_column("Target")
    table.add_column("Auth")
    table.add_column("Address")
    table.add_column("TLS")
    table.add_column("Path")
    table.add_column("UFW")

    for s in servers:
        auth = "password (****)" if s.uses_password else "key"
        if classify_address(s.domain_or_ip) is AddressKind.IPV4:
            tls = "self-signed redirect"
        else:
            tls = f"certbot ({s.certbot_email})"
        table.add_row(
            s.name,
            f"{s.user}@{s.host}",
            auth,
            s.domain_or_ip,
            tls,
            s.supabase_path,
            "yes" if s.enable_ufw else "no",
        )
    console.print(table)


@app.command()
def check(
    inventory: Optional[Path] = typer.Option(None, "--inventory", "-i", help="Path to servers.json"),
    templates: Optional[Path] = typer.Option(None, "--templates", help="Directory holding the nginx templates"),
) -> None:
    """Validate the inventory and templates without connecting to any server."""
    cfg = resolve_config(inventory=inventory, templates=templates)
    try:
        servers = load_inventory(cfg.inventory_path)
        load_templates(cfg.template_dir)
    except SupahostError as exc:
        raise fail(exc)
    console.print(f"[green]OK[/green] {len(servers)} server(s), templates in {cfg.template_dir}")
