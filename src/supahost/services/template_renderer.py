"""Jinja2-based NGINX site config renderer."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from jinja2 import Environment, StrictUndefined, TemplateError as JinjaTemplateError

from supahost.constants import INSECURE_TEMPLATE, PLACEHOLDER, SECURE_TEMPLATE
from supahost.errors import TemplateError
from supahost.services.address import AddressKind, classify_address


def _get_env() -> Environment:
    return Environment(
        autoescape=False,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


@dataclass(frozen=True)
class NginxTemplates:
    """Template sources, loaded once per run."""

    secure: str
    insecure: str

    def for_kind(self, kind: AddressKind) -> str:
        return self.insecure if kind is AddressKind.IPV4 else self.secure


def load_templates(template_dir: Path) -> NginxTemplates:
    """Read both template files. Raises TemplateError if either is missing."""
    sources: dict[str, str] = {}
    for label, filename in (("secure", SECURE_TEMPLATE), ("insecure", INSECURE_TEMPLATE)):
        path = template_dir / filename
        if not path.is_file():
            raise TemplateError(f"Nginx {label} template '{path}' not found.")
        sources[label] = path.read_text()
    return NginxTemplates(**sources)


def render_template(source: str, substitutions: Mapping[str, str]) -> str:
    """Replace every placeholder in ``source`` with its substitution."""
    try:
        return _get_env().from_string(source).render(**substitutions)
    except JinjaTemplateError as exc:
        raise TemplateError(f"Failed to render nginx template: {exc}") from exc


def render_site(templates: NginxTemplates, domain_or_ip: str) -> tuple[AddressKind, str]:
    """Select the template variant for ``domain_or_ip`` and render it."""
    kind = classify_address(domain_or_ip)
    return kind, render_template(templates.for_kind(kind), {PLACEHOLDER: domain_or_ip})
