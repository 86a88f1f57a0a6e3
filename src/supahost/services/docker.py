"""Docker Engine install and Compose lifecycle on the remote host."""

from __future__ import annotations

from supahost.constants import DOCKER_APT_SOURCE, DOCKER_KEYRING, DOCKER_KEYRING_DIR, DOCKER_PACKAGES
from supahost.services import packages
from supahost.services.runner import StepRunner


def ensure_installed(run: StepRunner) -> None:
    """Install Docker from the upstream apt repository if it is missing."""
    if run.shell.command_exists("docker"):
        run.log.info("Docker is already installed.")
    else:
        run.log.info("Installing Docker...")
        run.sudo(["install", "-m", "0755", "-d", DOCKER_KEYRING_DIR])
        run.sudo(["rm", "-f", DOCKER_KEYRING])
        os_id = run.user('. /etc/os-release && echo "$ID"').stdout.strip() or "ubuntu"
        run.sudo(f"curl -fsSL https://download.docker.com/linux/{os_id}/gpg | gpg --dearmor -o {DOCKER_KEYRING}")
        run.sudo(["chmod", "a+r", DOCKER_KEYRING])
        arch = run.user(["dpkg", "--print-architecture"]).stdout.strip()
        codename = run.user(["lsb_release", "-cs"]).stdout.strip()
        run.write_file(
            DOCKER_APT_SOURCE,
            f"deb [arch={arch} signed-by={DOCKER_KEYRING}] "
            f"https://download.docker.com/linux/{os_id} {codename} stable\n",
            sudo=True,
        )
        packages.update(run)
        packages.install(run, *DOCKER_PACKAGES)
        run.log.info("Docker installed.")
    packages.ensure_service(run, "docker")


def compose_available(run: StepRunner) -> bool:
    # sudo: the user may not be in the docker group yet
    return run.shell.run(["docker", "compose", "version"], sudo=True).ok


def ensure_compose(run: StepRunner) -> None:
    if compose_available(run):
        run.log.info("Docker Compose plugin is available.")
        return
    run.log.error("Docker Compose plugin not found or not working. Attempting to reinstall...")
    packages.install(run, "docker-compose-plugin", reinstall=True)
    if not compose_available(run):
        run.warn("Failed to verify Docker Compose plugin. Manual intervention might be required.")


def compose_pull(run: StepRunner, compose_file: str) -> None:
    run.sudo(["docker", "compose", "-f", compose_file, "pull"])


def compose_up(run: StepRunner, compose_file: str) -> None:
    run.sudo(["docker", "compose", "-f", compose_file, "up", "-d", "--remove-orphans"])
