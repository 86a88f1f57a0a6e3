"""Deploy Supabase to every server in the inventory."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from supahost.commands._common import console, fail, resolve_config
from supahost.config import LogLevel
from supahost.errors import SupahostError
from supahost.log import setup_logging
from supahost.models import ServerReport
from supahost.services import deployer
from supahost.services.inventory import load_inventory
from supahost.services.template_renderer import load_templates

_STATUS_STYLE = {"ok": "green", "warnings": "yellow", "failed": "red"}


def deploy(
    inventory: Optional[Path] = typer.Option(None, "--inventory", "-i", help="Path to servers.json"),
    templates: Optional[Path] = typer.Option(None, "--templates", help="Directory holding the nginx templates"),
    log_level: Optional[LogLevel] = typer.Option(None, "--log-level", "-l", help="silent, info or debug"),
    fail_fast: Optional[bool] = typer.Option(
        None, "--fail-fast/--keep-going", help="Stop at the first failed server"
    ),
) -> None:
    """Provision Supabase on each server listed in the inventory."""
    cfg = resolve_config(inventory=inventory, templates=templates, log_level=log_level, fail_fast=fail_fast)
    setup_logging(cfg.log_level)

    # Local preconditions: nothing remote is touched if these fail.
    try:
        servers = load_inventory(cfg.inventory_path)
        nginx_templates = load_templates(cfg.template_dir)
    except SupahostError as exc:
        raise fail(exc)

    if not servers:
        console.print(f"[yellow]No servers listed in {cfg.inventory_path}.[/yellow]")
        return

    reports = deployer.deploy_all(servers, nginx_templates, cfg)
    _print_summary(reports)

    stopped_early = len(reports) < len(servers)
    if stopped_early:
        raise typer.Exit(1)


def _print_summary(reports: list[ServerReport]) -> None:
    table = Table(title="Supabase deployments")
    table.add_column("Server", style="cyan")
    table.add_column("Host")
    table.add_column("Address")
    table.add_column("Status")
    table.add_column("Warnings", justify="right")

    for report in reports:
        style = _STATUS_STYLE[report.status]
        table.add_row(
            report.name,
            report.host,
            report.domain_or_ip,
            f"[{style}]{report.status}[/{style}]",
            str(report.warning_count),
        )
    console.print(table)
