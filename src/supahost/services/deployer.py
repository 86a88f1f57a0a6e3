"""Run the Provisioner across the inventory, one server at a time."""

from __future__ import annotations

import logging
from contextlib import AbstractContextManager
from typing import Callable, Iterable

from supahost.config import DeployConfig
from supahost.errors import SupahostError
from supahost.models import ServerDescriptor, ServerReport
from supahost.services.provisioner import Provisioner
from supahost.services.remote import RemoteShell, open_shell
from supahost.services.template_renderer import NginxTemplates

log = logging.getLogger(__name__)

ShellFactory = Callable[[ServerDescriptor, float], AbstractContextManager[RemoteShell]]


def _default_shell_factory(server: ServerDescriptor, timeout: float) -> AbstractContextManager[RemoteShell]:
    return open_shell(server, timeout=timeout)


def deploy_server(
    server: ServerDescriptor,
    templates: NginxTemplates,
    config: DeployConfig,
    shell_factory: ShellFactory = _default_shell_factory,
) -> ServerReport:
    """Provision one server; connection and channel errors become a failed report."""
    log.info(
        "--- Starting Supabase deployment to %s (%s) for %s ---",
        server.name, server.host, server.domain_or_ip,
    )
    try:
        with shell_factory(server, config.connect_timeout) as shell:
            report = Provisioner(server, shell, templates, config).run()
    except SupahostError as exc:
        report = ServerReport(
            name=server.name,
            host=server.host,
            domain_or_ip=server.domain_or_ip,
            error=str(exc),
        )

    if report.succeeded:
        log.info("--- Successfully deployed Supabase to %s (%s) ---", server.name, server.domain_or_ip)
    else:
        log.error(
            "Supabase deployment FAILED for %s (%s): %s",
            server.name, server.domain_or_ip, report.error or _fatal_reason(report),
        )
    return report


def deploy_all(
    servers: Iterable[ServerDescriptor],
    templates: NginxTemplates,
    config: DeployConfig,
    shell_factory: ShellFactory = _default_shell_factory,
) -> list[ServerReport]:
    """Deploy to every server in order. Stops after a failure only with fail_fast."""
    reports: list[ServerReport] = []
    for server in servers:
        report = deploy_server(server, templates, config, shell_factory)
        reports.append(report)
        if not report.succeeded and config.fail_fast:
            log.error("Stopping after failed deployment to %s (fail-fast).", server.name)
            break
    log.info("All Supabase deployments processed.")
    return reports


def _fatal_reason(report: ServerReport) -> str:
    for step in report.steps:
        if step.is_fatal:
            return f"{step.name} step failed"
    return "unknown error"
