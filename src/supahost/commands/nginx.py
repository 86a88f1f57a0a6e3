"""Preview the rendered NGINX config."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.syntax import Syntax

from supahost.commands._common import console, fail, resolve_config
from supahost.errors import SupahostError
from supahost.services.address import AddressKind
from supahost.services.template_renderer import load_templates, render_site

app = typer.Typer(no_args_is_help=True)


@app.command()
def render(
    domain_or_ip: str = typer.Argument(help="Domain name or IPv4 address the site is served on"),
    templates: Optional[Path] = typer.Option(None, "--templates", help="Directory holding the nginx templates"),
) -> None:
    """Show the NGINX site config a server with this address would get."""
    cfg = resolve_config(templates=templates)
    try:
        kind, rendered = render_site(load_templates(cfg.template_dir), domain_or_ip)
    except SupahostError as exc:
        raise fail(exc)

    variant = "insecure (IP, HTTP only)" if kind is AddressKind.IPV4 else "secure (domain, certbot)"
    console.print(f"[bold]Template:[/bold] {variant}")
    console.print(Syntax(rendered, "nginx", theme="monokai"))
