"""Shared test fixtures."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import pytest

from supahost.config import DeployConfig, LogLevel
from supahost.constants import TEMPLATE_DIR
from supahost.models import ServerDescriptor
from supahost.services.remote import Command, CommandResult, RemoteShell
from supahost.services.template_renderer import NginxTemplates, load_templates

EXAMPLE_ENV = (
    "############\n"
    "# Secrets\n"
    "############\n"
    "\n"
    "POSTGRES_PASSWORD=your-super-secret-and-long-postgres-password\n"
    "JWT_SECRET=your-super-secret-jwt-token-with-at-least-32-characters-long\n"
    "ANON_KEY=eyJhbGciOiJIUzI1NiJ9.example-anon\n"
    "SERVICE_ROLE_KEY=eyJhbGciOiJIUzI1NiJ9.example-service\n"
    "DASHBOARD_USERNAME=supabase\n"
    "DASHBOARD_PASSWORD=this_password_is_insecure_and_should_be_updated\n"
    "\n"
    "SITE_URL=http://localhost:3000\n"
    "API_EXTERNAL_URL=http://localhost:8000\n"
    "SUPABASE_PUBLIC_URL=http://localhost:8000\n"
    "KONG_HTTP_PORT=8000\n"
    "KONG_HTTPS_PORT=8443\n"
)


class FakeShell(RemoteShell):
    """In-memory RemoteShell: records command lines and simulates a filesystem.

    ``failures`` maps a substring of a command line to ``(status, stderr)``.
    """

    def __init__(
        self,
        *,
        user: str = "deploy",
        host: str = "fake-host",
        files: Optional[dict[str, str]] = None,
        dirs: Optional[set[str]] = None,
        commands: Optional[set[str]] = None,
        failures: Optional[dict[str, tuple[int, str]]] = None,
    ):
        self.user = user
        self.host = host
        self.files = dict(files or {})
        self.dirs = set(dirs or ())
        self.commands = set(commands or ())
        self.failures = dict(failures or {})
        self.calls: list[str] = []
        self.closed = False

    def run(self, command: Command, *, sudo: bool = False, input: Optional[str] = None) -> CommandResult:
        line = self.build(command, sudo=sudo)
        self.calls.append(line)
        for pattern, (status, stderr) in self.failures.items():
            if pattern in line:
                return CommandResult(command=line, exit_status=status, stderr=stderr)
        stdout = self._simulate(list(command) if not isinstance(command, str) else [])
        return CommandResult(command=line, exit_status=0, stdout=stdout)

    def _simulate(self, argv: list[str]) -> str:
        if argv[:2] == ["id", "-un"] or argv[:2] == ["id", "-gn"]:
            return f"{self.user}\n"
        if argv[:1] == ["cp"]:
            self.files[argv[2]] = self.files.get(argv[1], "")
        elif argv[:2] == ["rm", "-f"]:
            self.files.pop(argv[2], None)
        elif argv[:2] == ["ln", "-sf"]:
            self.files[argv[3]] = self.files.get(argv[2], "")
        elif argv[:2] == ["mkdir", "-p"]:
            self.dirs.add(argv[2])
        elif argv[:2] == ["git", "clone"]:
            self.dirs.add(f"{argv[-1].rstrip('/')}/.git")
        elif argv[:3] == ["env", "DEBIAN_FRONTEND=noninteractive", "apt-get"] and "install" in argv:
            self.commands.update(_BINARIES.get(pkg, pkg) for pkg in argv[argv.index("-y") + 1:])
        return ""

    def command_exists(self, name: str) -> bool:
        self.calls.append(f"command -v {name}")
        return name in self.commands

    def path_exists(self, path: str, *, sudo: bool = False) -> bool:
        return path in self.files or path in self.dirs

    def is_dir(self, path: str, *, sudo: bool = False) -> bool:
        return path in self.dirs

    def is_file(self, path: str, *, sudo: bool = False) -> bool:
        return path in self.files

    def read_file(self, path: str, *, sudo: bool = False) -> Optional[str]:
        return self.files.get(path)

    def write_file(self, path: str, content: str, *, sudo: bool = False) -> CommandResult:
        line = f"write {path}"
        self.calls.append(line)
        for pattern, (status, stderr) in self.failures.items():
            if pattern in line:
                return CommandResult(command=line, exit_status=status, stderr=stderr)
        self.files[path] = content
        return CommandResult(command=line, exit_status=0)

    def close(self) -> None:
        self.closed = True

    def ran(self, fragment: str) -> bool:
        return any(fragment in call for call in self.calls)


_BINARIES = {"docker-ce": "docker", "python3-certbot-nginx": "certbot"}


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def templates() -> NginxTemplates:
    return load_templates(TEMPLATE_DIR)


@pytest.fixture
def config(tmp_path: Path) -> DeployConfig:
    return DeployConfig(
        inventory_path=tmp_path / "servers.json",
        template_dir=TEMPLATE_DIR,
        log_level=LogLevel.DEBUG,
    )


@pytest.fixture
def domain_server() -> ServerDescriptor:
    return ServerDescriptor(
        name="prod",
        host="10.0.0.10",
        user="deploy",
        domain_or_ip="app.example.org",
        certbot_email="a@b.com",
    )


@pytest.fixture
def ip_server() -> ServerDescriptor:
    return ServerDescriptor(
        name="lab",
        host="203.0.113.5",
        user="deploy",
        password="secret",
        domain_or_ip="203.0.113.5",
    )


@pytest.fixture
def fresh_shell() -> FakeShell:
    """A bare host with only the Supabase checkout's example env in place."""
    return FakeShell(files={"/opt/supabase_instance/docker/.env.example": EXAMPLE_ENV})


def shell_factory_for(shells: dict[str, FakeShell]):
    """Build a deployer shell factory that hands out FakeShells by server name."""

    @contextmanager
    def factory(server: ServerDescriptor, timeout: float):
        shell = shells[server.name]
        try:
            yield shell
        finally:
            shell.close()

    return factory
