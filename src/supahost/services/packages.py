"""apt and systemd helpers."""

from __future__ import annotations

from supahost.services.runner import StepRunner


def apt_get(*args: str) -> list[str]:
    return ["env", "DEBIAN_FRONTEND=noninteractive", "apt-get", *args]


def update(run: StepRunner) -> None:
    run.sudo(apt_get("update", "-y"))


def install(run: StepRunner, *packages: str, reinstall: bool = False) -> None:
    args = ["install", "-y"]
    if reinstall:
        args.insert(1, "--reinstall")
    run.sudo(apt_get(*args, *packages))


def ensure_service(run: StepRunner, name: str) -> None:
    """Enable and start a systemd unit (no-op if it already is)."""
    run.sudo(["systemctl", "enable", name])
    run.sudo(["systemctl", "start", name])
