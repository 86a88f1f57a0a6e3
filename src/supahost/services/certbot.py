"""Certbot certificate issuance via the nginx plugin."""

from __future__ import annotations

from supahost.constants import CERTBOT_PACKAGES, CERTBOT_WEBROOT, NGINX_RUNTIME_USER
from supahost.services import packages
from supahost.services.runner import StepRunner


def ensure_installed(run: StepRunner) -> None:
    if run.shell.command_exists("certbot"):
        run.log.info("Certbot is already installed.")
        return
    run.log.info("Installing Certbot...")
    packages.install(run, *CERTBOT_PACKAGES)
    run.log.info("Certbot installed.")


def ensure_webroot(run: StepRunner) -> None:
    run.sudo(["mkdir", "-p", CERTBOT_WEBROOT])
    run.sudo(["chown", f"{NGINX_RUNTIME_USER}:{NGINX_RUNTIME_USER}", CERTBOT_WEBROOT])


def issue_cert_command(domain: str, email: str) -> list[str]:
    return [
        "certbot", "--nginx",
        "-d", domain,
        "--non-interactive", "--agree-tos",
        "-m", email,
        "--redirect",
    ]


def issue_cert(run: StepRunner, domain: str, email: str) -> bool:
    """Request a Let's Encrypt certificate and let certbot rewrite the site for HTTPS."""
    return run.sudo(issue_cert_command(domain, email)).ok
