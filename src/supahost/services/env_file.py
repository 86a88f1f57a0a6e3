"""Selective rewriting of the Supabase ``.env`` file.

All functions here operate on the file's text so they can be exercised
without a remote host. Lines that are not touched keep their content and
position; a key that is missing is appended at the end.
"""

from __future__ import annotations

import re
import secrets
from typing import Callable, Optional

from supahost.constants import (
    ANON_KEY_PLACEHOLDER,
    KONG_HTTP_PORT,
    KONG_HTTPS_PORT,
    SERVICE_KEY_PLACEHOLDER,
    URL_KEYS,
)
from supahost.services.address import site_url

SecretFactory = Callable[[int], str]

# key -> (random bytes, values shipped in .env.example over the years)
GENERATED_SECRETS: dict[str, tuple[int, frozenset[str]]] = {
    "POSTGRES_PASSWORD": (
        32,
        frozenset({
            "YOUR_POSTGRES_PASSWORD",
            "your-super-secret-and-long-postgres-password",
        }),
    ),
    "JWT_SECRET": (
        64,
        frozenset({
            "YOUR_JWT_SECRET_WHICH_IS_AT_LEAST_32_CHARACTERS_LONG",
            "super-secret-jwt-token-with-at-least-32-characters-long",
            "your-super-secret-jwt-token-with-at-least-32-characters-long",
        }),
    ),
    "DASHBOARD_PASSWORD": (
        32,
        frozenset({
            "YOUR_DASHBOARD_PASSWORD",
            "this_password_is_insecure_and_should_be_updated",
        }),
    ),
}


def generate_secret(nbytes: int) -> str:
    """URL-safe random secret; avoids ``/`` and ``+`` which break Postgres URLs."""
    return secrets.token_urlsafe(nbytes)


def _key_re(key: str) -> re.Pattern[str]:
    return re.compile(rf"^{re.escape(key)}=(.*)$", re.MULTILINE)


def get_env_var(content: str, key: str) -> Optional[str]:
    """Return the value of ``key``, or None if the key is not set."""
    match = _key_re(key).search(content)
    return match.group(1) if match else None


def set_env_var(content: str, key: str, value: str) -> str:
    """Set ``key=value``, rewriting the existing line or appending a new one."""
    pattern = _key_re(key)
    if pattern.search(content):
        return pattern.sub(lambda _: f"{key}={value}", content)
    if content and not content.endswith("\n"):
        content += "\n"
    return f"{content}{key}={value}\n"


def needs_secret(content: str, key: str) -> bool:
    """True when the secret is missing, empty, or a known insecure default."""
    _, placeholders = GENERATED_SECRETS[key]
    value = get_env_var(content, key)
    if not value:
        return True
    return value.strip().strip('"').strip("'") in placeholders


def materialize_env(
    content: str,
    domain_or_ip: str,
    *,
    reset_api_keys: bool = True,
    secret_factory: SecretFactory = generate_secret,
) -> tuple[str, list[str]]:
    """Apply the deployment's settings to ``.env`` text.

    Returns the new text and the keys that were written, in order.
    """
    changed: list[str] = []

    def _set(key: str, value: str) -> None:
        nonlocal content
        content = set_env_var(content, key, value)
        changed.append(key)

    for key, (nbytes, _) in GENERATED_SECRETS.items():
        if needs_secret(content, key):
            _set(key, secret_factory(nbytes))

    # Supabase regenerates these from JWT_SECRET when it sees the placeholders.
    if reset_api_keys:
        _set("ANON_KEY", ANON_KEY_PLACEHOLDER)
        _set("SERVICE_ROLE_KEY", SERVICE_KEY_PLACEHOLDER)

    url = site_url(domain_or_ip)
    for key in URL_KEYS:
        _set(key, url)

    _set("KONG_HTTP_PORT", KONG_HTTP_PORT)
    _set("KONG_HTTPS_PORT", KONG_HTTPS_PORT)
    return content, changed
