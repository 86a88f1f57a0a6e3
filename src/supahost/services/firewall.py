"""UFW firewall setup."""

from __future__ import annotations

from supahost.services import packages
from supahost.services.runner import StepRunner

ALLOWED_SERVICES = ("ssh", "http", "https")


def configure_ufw(run: StepRunner) -> None:
    """Deny inbound except SSH/HTTP/HTTPS, allow outbound, enable."""
    if not run.shell.command_exists("ufw"):
        run.log.info("Installing UFW firewall...")
        packages.install(run, "ufw")
    run.log.info("Configuring UFW firewall...")
    run.sudo(["ufw", "default", "deny", "incoming"])
    run.sudo(["ufw", "default", "allow", "outgoing"])
    for service in ALLOWED_SERVICES:
        run.sudo(["ufw", "allow", service])
    run.sudo(["ufw", "--force", "enable"])
    status = run.sudo(["ufw", "status", "verbose"])
    if status.ok:
        run.log.debug("UFW status:\n%s", status.stdout.rstrip())
    run.log.info("UFW firewall configured and enabled.")
