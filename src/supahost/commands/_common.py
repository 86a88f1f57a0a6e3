"""Option resolution shared by commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console

from supahost.config import DeployConfig, LogLevel, get_config
from supahost.errors import SupahostError

console = Console()


def resolve_config(
    *,
    inventory: Optional[Path] = None,
    templates: Optional[Path] = None,
    log_level: Optional[LogLevel] = None,
    fail_fast: Optional[bool] = None,
) -> DeployConfig:
    """Apply CLI overrides on top of the environment-derived config."""
    update: dict[str, Any] = {}
    if inventory is not None:
        update["inventory_path"] = inventory
    if templates is not None:
        update["template_dir"] = templates
    if log_level is not None:
        update["log_level"] = log_level
    if fail_fast is not None:
        update["fail_fast"] = fail_fast
    return get_config().model_copy(update=update)


def fail(exc: SupahostError) -> typer.Exit:
    console.print(f"[red]Error:[/red] {exc}")
    return typer.Exit(exc.exit_code)
