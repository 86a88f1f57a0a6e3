"""Supabase repository checkout on the remote host."""

from __future__ import annotations

from supahost.constants import SUPABASE_REPO_URL
from supahost.services.runner import StepRunner


def take_ownership(run: StepRunner, path: str) -> None:
    """Create ``path`` and hand it to the connected user so git runs unprivileged."""
    run.sudo(["mkdir", "-p", path])
    user, group = run.shell.identity()
    run.sudo(["chown", "-R", f"{user}:{group}", path])


def clone_or_pull(run: StepRunner, path: str, repo_url: str = SUPABASE_REPO_URL) -> None:
    if run.shell.is_dir(f"{path.rstrip('/')}/.git"):
        run.log.info("Supabase repository exists. Pulling latest changes...")
        run.user(["git", "-C", path, "pull"])
    else:
        run.log.info("Cloning Supabase repository...")
        run.user(["git", "clone", "--depth", "1", repo_url, path])
