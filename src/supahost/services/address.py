"""Classify the target address: bare IPv4 literal or hostname."""

from __future__ import annotations

import re
from enum import Enum

_DOTTED_QUAD_RE = re.compile(r"([0-9]{1,3})\.([0-9]{1,3})\.([0-9]{1,3})\.([0-9]{1,3})", re.ASCII)


class AddressKind(str, Enum):
    IPV4 = "ipv4"
    HOSTNAME = "hostname"


def classify_address(value: str) -> AddressKind:
    """Return IPV4 for a strict dotted-quad literal, HOSTNAME for anything else.

    IPv6 literals are deliberately HOSTNAME: they get the secure template.
    """
    match = _DOTTED_QUAD_RE.fullmatch(value)
    if match and all(int(octet) <= 255 for octet in match.groups()):
        return AddressKind.IPV4
    return AddressKind.HOSTNAME


def is_ipv4(value: str) -> bool:
    return classify_address(value) is AddressKind.IPV4


def site_protocol(value: str) -> str:
    return "http" if is_ipv4(value) else "https"


def site_url(value: str) -> str:
    """Public URL for the deployed instance, e.g. ``https://api.example.com``."""
    return f"{site_protocol(value)}://{value}"
