"""Per-server provisioning sequence."""

from __future__ import annotations

from typing import Callable

from supahost.config import DeployConfig
from supahost.constants import PREREQUISITE_PACKAGES
from supahost.errors import NginxConfigError, TemplateError
from supahost.log import server_logger
from supahost.models import ServerDescriptor, ServerReport, StepResult, StepStatus
from supahost.services import certbot, docker, firewall, nginx, packages, repository
from supahost.services.address import AddressKind, classify_address, site_url
from supahost.services.env_file import materialize_env
from supahost.services.remote import RemoteShell
from supahost.services.runner import StepRunner
from supahost.services.template_renderer import NginxTemplates, render_site


class Provisioner:
    """Drives one server from a bare OS to Supabase behind nginx.

    Every step is safe to re-run. Steps run in order; a fatal step ends the
    server's run, warnings do not.
    """

    def __init__(
        self,
        server: ServerDescriptor,
        shell: RemoteShell,
        templates: NginxTemplates,
        config: DeployConfig,
    ):
        self.server = server
        self.shell = shell
        self.templates = templates
        self.config = config
        self.kind = classify_address(server.domain_or_ip)
        self.log = server_logger(__name__, server.name)

    @property
    def steps(self) -> list[tuple[str, Callable[[StepRunner], StepResult]]]:
        return [
            ("Dependencies", self.ensure_dependencies),
            ("Application", self.fetch_application),
            ("Configuration", self.materialize_config),
            ("Stack", self.start_stack),
            ("Reverse proxy", self.configure_proxy),
            ("TLS", self.issue_certificate),
            ("Firewall", self.configure_firewall),
        ]

    def run(self) -> ServerReport:
        report = ServerReport(
            name=self.server.name,
            host=self.server.host,
            domain_or_ip=self.server.domain_or_ip,
        )
        for name, step in self.steps:
            result = step(StepRunner(name, self.shell, self.log))
            report.steps.append(result)
            if result.is_fatal:
                return report
        self._log_summary()
        return report

    # -- steps ---------------------------------------------------------------

    def ensure_dependencies(self, run: StepRunner) -> StepResult:
        run.log.info("Updating system packages...")
        packages.update(run)
        run.log.info("Installing essential tools (%s)...", ", ".join(PREREQUISITE_PACKAGES))
        packages.install(run, *PREREQUISITE_PACKAGES)
        docker.ensure_installed(run)
        docker.ensure_compose(run)
        nginx.ensure_installed(run)
        return run.result()

    def fetch_application(self, run: StepRunner) -> StepResult:
        path = self.server.supabase_path
        run.log.info("Setting up Supabase in %s...", path)
        repository.take_ownership(run, path)
        repository.clone_or_pull(run, path)
        return run.result()

    def materialize_config(self, run: StepRunner) -> StepResult:
        env_path = f"{self.server.docker_dir}/.env"
        if run.shell.path_exists(env_path):
            run.log.info(".env file already exists.")
        else:
            run.log.info("Creating .env file from .env.example...")
            run.user(["cp", f"{self.server.docker_dir}/.env.example", env_path])

        content = run.shell.read_file(env_path)
        if content is None:
            return run.fatal(f"Cannot read {env_path}; Supabase cannot be configured.")

        run.log.info("Configuring Supabase .env variables...")
        updated, keys = materialize_env(
            content,
            self.server.domain_or_ip,
            reset_api_keys=self.config.reset_api_keys,
        )
        run.write_file(env_path, updated)
        for key in keys:
            run.log.info("Set %s in .env", key)
        return run.result()

    def start_stack(self, run: StepRunner) -> StepResult:
        compose_file = self.server.compose_file
        run.log.info("Pulling Supabase Docker images...")
        docker.compose_pull(run, compose_file)
        run.log.info("Starting Supabase services...")
        docker.compose_up(run, compose_file)
        run.log.warning(
            "Supabase services started. It might take a few minutes for them to be fully operational."
        )
        run.log.info("You can check logs using: sudo docker compose -f %s logs -f", compose_file)
        return run.result()

    def configure_proxy(self, run: StepRunner) -> StepResult:
        target = self.server.domain_or_ip
        try:
            kind, rendered = render_site(self.templates, target)
        except TemplateError as exc:
            return run.fatal(str(exc))

        nginx.remove_conflicting_sites(run)
        if kind is AddressKind.IPV4:
            run.log.info("Configuring Nginx for IP address (HTTP): %s", target)
            nginx.ensure_snakeoil_cert(run)
        else:
            run.log.info("Configuring Nginx for domain (HTTPS via Certbot): %s", target)
        nginx.deploy_site(run, rendered)

        run.log.info("Testing Nginx configuration...")
        try:
            nginx.reload(run)
        except NginxConfigError as exc:
            run.log.error("Contents of %s:\n%s", nginx.AVAILABLE_PATH, exc.rendered)
            return run.fatal(str(exc), detail=exc.rendered)
        run.log.info("Nginx configuration test successful.")
        return run.result()

    def issue_certificate(self, run: StepRunner) -> StepResult:
        if self.kind is AddressKind.IPV4:
            run.log.debug("Skipping certificate issuance for IP address %s", self.server.domain_or_ip)
            return StepResult(name=run.name, status=StepStatus.SKIPPED)
        certbot.ensure_installed(run)
        certbot.ensure_webroot(run)
        run.log.info("Requesting SSL certificate from Let's Encrypt for %s...", self.server.domain_or_ip)
        if certbot.issue_cert(run, self.server.domain_or_ip, self.server.certbot_email):
            run.log.info("Certbot SSL setup complete. Auto-renewal should be configured.")
        run.log.info("Restarting Nginx to apply all changes...")
        nginx.restart(run)
        return run.result()

    def configure_firewall(self, run: StepRunner) -> StepResult:
        if not self.server.enable_ufw:
            run.log.info("UFW firewall setup skipped as per configuration.")
            return StepResult(name=run.name, status=StepStatus.SKIPPED)
        firewall.configure_ufw(run)
        return run.result()

    def _log_summary(self) -> None:
        target = self.server.domain_or_ip
        compose_file = self.server.compose_file
        self.log.info("Supabase deployment for %s completed.", target)
        self.log.info("Access Supabase Studio at: %s", site_url(target))
        self.log.info("Check Supabase service logs for errors or generated API keys:")
        self.log.info("  sudo docker compose -f %s logs kong", compose_file)
        self.log.info("  sudo docker compose -f %s logs auth", compose_file)
