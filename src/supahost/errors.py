"""Custom exceptions for supahost."""

from __future__ import annotations


class SupahostError(Exception):
    """Base exception for all supahost operations."""

    def __init__(self, message: str, *, exit_code: int = 1):
        super().__init__(message)
        self.exit_code = exit_code


class InventoryError(SupahostError):
    """Server inventory is missing or malformed."""


class TemplateError(SupahostError):
    """NGINX template is missing or cannot be rendered."""


class RemoteConnectionError(SupahostError):
    """SSH connection could not be established or was lost."""


class NginxConfigError(SupahostError):
    """NGINX configuration validation failed."""

    def __init__(self, message: str, *, rendered: str = "", exit_code: int = 1):
        super().__init__(message, exit_code=exit_code)
        self.rendered = rendered
