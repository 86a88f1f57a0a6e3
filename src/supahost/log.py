"""Leveled text logging to stderr."""

from __future__ import annotations

import logging
import sys
from typing import Any, MutableMapping

from supahost.config import LogLevel

_FORMAT = "%(levelname)s: %(message)s"


def setup_logging(level: LogLevel) -> None:
    """Configure the root logger for the given supahost log level."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    root.addHandler(handler)
    root.setLevel(level.logging_level)
    # paramiko is chatty at INFO ("Connected (version 2.0, ...)")
    logging.getLogger("paramiko").setLevel(max(level.logging_level, logging.WARNING))


class ServerLogAdapter(logging.LoggerAdapter):
    """Prefix every record with the server label."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        return f"[{self.extra['server']}] {msg}", kwargs


def server_logger(name: str, server: str) -> ServerLogAdapter:
    return ServerLogAdapter(logging.getLogger(name), {"server": server})
