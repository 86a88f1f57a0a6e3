"""Runtime configuration: DeployConfig resolved from the environment."""

from __future__ import annotations

import logging
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from supahost.constants import DEFAULT_INVENTORY_FILE, SSH_CONNECT_TIMEOUT, TEMPLATE_DIR


class LogLevel(str, Enum):
    SILENT = "silent"
    INFO = "info"
    DEBUG = "debug"

    @property
    def logging_level(self) -> int:
        return {
            LogLevel.SILENT: logging.ERROR,
            LogLevel.INFO: logging.INFO,
            LogLevel.DEBUG: logging.DEBUG,
        }[self]


_NUMERIC_LEVELS = {"0": "silent", "1": "info", "2": "debug"}


class DeployConfig(BaseSettings):
    """Settings shared by every server in a run."""

    inventory_path: Path = DEFAULT_INVENTORY_FILE
    template_dir: Path = TEMPLATE_DIR
    log_level: LogLevel = LogLevel.INFO
    fail_fast: bool = False
    reset_api_keys: bool = True
    connect_timeout: float = SSH_CONNECT_TIMEOUT

    model_config = SettingsConfigDict(env_prefix="SUPAHOST_")

    @field_validator("log_level", mode="before")
    @classmethod
    def _accept_numeric_level(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        if isinstance(value, str):
            value = value.strip().lower()
            return _NUMERIC_LEVELS.get(value, value)
        return value


@lru_cache(maxsize=1)
def get_config() -> DeployConfig:
    """Return the global DeployConfig (resolved once, cached)."""
    return DeployConfig()
