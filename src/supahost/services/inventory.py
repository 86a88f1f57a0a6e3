"""Server inventory reader."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from supahost.errors import InventoryError
from supahost.models import ServerDescriptor

log = logging.getLogger(__name__)

_ADAPTER = TypeAdapter(list[ServerDescriptor])


def parse_inventory(raw: str, *, source: str = "<inventory>") -> list[ServerDescriptor]:
    """Parse a JSON list of server records, applying defaults."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InventoryError(f"Server configuration file '{source}' is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise InventoryError(f"Server configuration file '{source}' must contain a JSON list of servers.")
    try:
        return _ADAPTER.validate_python(data)
    except ValidationError as exc:
        raise InventoryError(f"Invalid server entry in '{source}':\n{exc}") from exc


def load_inventory(path: Path) -> list[ServerDescriptor]:
    """Read and validate the inventory file. Raises InventoryError."""
    if not path.is_file():
        raise InventoryError(f"Server configuration file '{path}' not found.")
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise InventoryError(f"Cannot read server configuration file '{path}': {exc}") from exc
    servers = parse_inventory(raw, source=str(path))
    log.debug("Loaded %d server(s) from %s", len(servers), path)
    return servers
