"""NGINX install, site deployment and validation on the remote host."""

from __future__ import annotations

from supahost.constants import (
    NGINX_SITE_NAME,
    NGINX_SITES_AVAILABLE,
    NGINX_SITES_ENABLED,
    SNAKEOIL_CERT,
    SNAKEOIL_KEY,
)
from supahost.errors import NginxConfigError
from supahost.services import packages
from supahost.services.runner import StepRunner

AVAILABLE_PATH = f"{NGINX_SITES_AVAILABLE}/{NGINX_SITE_NAME}"
ENABLED_PATH = f"{NGINX_SITES_ENABLED}/{NGINX_SITE_NAME}"
DEFAULT_SITE = f"{NGINX_SITES_ENABLED}/default"


def ensure_installed(run: StepRunner) -> None:
    if run.shell.command_exists("nginx"):
        run.log.info("Nginx is already installed.")
    else:
        run.log.info("Installing Nginx...")
        packages.install(run, "nginx")
        run.log.info("Nginx installed.")
    packages.ensure_service(run, "nginx")


def remove_conflicting_sites(run: StepRunner) -> None:
    """Drop the distro default site and any config from a previous run."""
    if run.shell.path_exists(DEFAULT_SITE, sudo=True):
        run.log.info("Removing default Nginx site configuration...")
        run.sudo(["rm", "-f", DEFAULT_SITE])
    for path in (ENABLED_PATH, AVAILABLE_PATH):
        if run.shell.path_exists(path, sudo=True):
            run.sudo(["rm", "-f", path])


def ensure_snakeoil_cert(run: StepRunner) -> None:
    """Self-signed cert so the IP variant can bind 443 for its redirect."""
    if run.shell.is_file(SNAKEOIL_CERT, sudo=True) and run.shell.is_file(SNAKEOIL_KEY, sudo=True):
        return
    run.log.info("Generating self-signed snakeoil certificates...")
    packages.install(run, "ssl-cert")
    run.sudo(["make-ssl-cert", "generate-default-snakeoil", "--force-overwrite"])


def deploy_site(run: StepRunner, rendered: str) -> None:
    run.write_file(AVAILABLE_PATH, rendered, sudo=True)
    run.log.info("Nginx config written to %s", AVAILABLE_PATH)
    run.sudo(["ln", "-sf", AVAILABLE_PATH, ENABLED_PATH])
    run.log.info("Nginx config symlinked to %s", ENABLED_PATH)


def validate_config(run: StepRunner) -> None:
    """Run ``nginx -t``. Raises NginxConfigError carrying the deployed file."""
    result = run.shell.run(["nginx", "-t"], sudo=True)
    if result.ok:
        return
    rendered = run.shell.read_file(AVAILABLE_PATH, sudo=True) or ""
    raise NginxConfigError(
        f"Nginx configuration test failed. Please check {AVAILABLE_PATH}:\n{result.stderr.strip()}",
        rendered=rendered,
    )


def reload(run: StepRunner) -> None:
    """Validate config, then reload NGINX."""
    validate_config(run)
    run.sudo(["systemctl", "reload", "nginx"])


def restart(run: StepRunner) -> None:
    run.sudo(["systemctl", "restart", "nginx"])
