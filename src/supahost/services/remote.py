"""Remote command channel over SSH (paramiko)."""

from __future__ import annotations

import logging
import shlex
import socket
import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Generator, Optional, Sequence, Union

import paramiko

from supahost.errors import RemoteConnectionError
from supahost.models import ServerDescriptor

log = logging.getLogger(__name__)

Command = Union[str, Sequence[str]]


@dataclass(frozen=True)
class CommandResult:
    command: str
    exit_status: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_status == 0


class RemoteShell(ABC):
    """Command runner bound to one remote host.

    Subclasses implement :meth:`run`; the helpers below are built on it.
    """

    host: str = ""
    user: str = ""

    @abstractmethod
    def run(self, command: Command, *, sudo: bool = False, input: Optional[str] = None) -> CommandResult:
        """Run ``command`` and wait for it to exit."""

    def build(self, command: Command, *, sudo: bool = False) -> str:
        """Render ``command`` as a shell line, elevated with sudo unless we are root."""
        if isinstance(command, str):
            line = command
            if sudo and self.user != "root":
                line = f"sudo sh -c {shlex.quote(command)}"
            return line
        line = shlex.join(command)
        if sudo and self.user != "root":
            line = f"sudo {line}"
        return line

    def command_exists(self, name: str) -> bool:
        return self.run(f"command -v {shlex.quote(name)} >/dev/null 2>&1").ok

    def path_exists(self, path: str, *, sudo: bool = False) -> bool:
        return self.run(["test", "-e", path], sudo=sudo).ok

    def is_dir(self, path: str, *, sudo: bool = False) -> bool:
        return self.run(["test", "-d", path], sudo=sudo).ok

    def is_file(self, path: str, *, sudo: bool = False) -> bool:
        return self.run(["test", "-f", path], sudo=sudo).ok

    def read_file(self, path: str, *, sudo: bool = False) -> Optional[str]:
        """Return the file's text, or None if it cannot be read."""
        result = self.run(["cat", path], sudo=sudo)
        return result.stdout if result.ok else None

    def write_file(self, path: str, content: str, *, sudo: bool = False) -> CommandResult:
        return self.run(f"cat > {shlex.quote(path)}", sudo=sudo, input=content)

    def identity(self) -> tuple[str, str]:
        """Return the connected ``(user, primary group)``."""
        user = self.run(["id", "-un"]).stdout.strip() or self.user
        group = self.run(["id", "-gn"]).stdout.strip() or user
        return user, group

    def close(self) -> None:
        pass


_RECV_CHUNK = 32768
_POLL_INTERVAL = 0.1


def _drain(channel: paramiko.Channel) -> tuple[str, str]:
    """Read stdout and stderr together until the command exits.

    Both streams share the channel window, so neither may be left unread
    while waiting on the other.
    """
    out: list[bytes] = []
    err: list[bytes] = []
    while True:
        idle = True
        if channel.recv_ready():
            out.append(channel.recv(_RECV_CHUNK))
            idle = False
        if channel.recv_stderr_ready():
            err.append(channel.recv_stderr(_RECV_CHUNK))
            idle = False
        if idle:
            if channel.exit_status_ready() and not channel.recv_ready() and not channel.recv_stderr_ready():
                break
            time.sleep(_POLL_INTERVAL)
    return b"".join(out).decode(errors="replace"), b"".join(err).decode(errors="replace")


class SSHShell(RemoteShell):
    """RemoteShell backed by a paramiko SSHClient."""

    def __init__(self, client: paramiko.SSHClient, *, host: str, user: str):
        self._client = client
        self.host = host
        self.user = user

    def run(self, command: Command, *, sudo: bool = False, input: Optional[str] = None) -> CommandResult:
        line = self.build(command, sudo=sudo)
        log.debug("SSH CMD to %s@%s: %s", self.user, self.host, line)
        try:
            stdin, stdout, _ = self._client.exec_command(line)
            if input is not None:
                stdin.write(input)
                stdin.channel.shutdown_write()
            out, err = _drain(stdout.channel)
            status = stdout.channel.recv_exit_status()
        except (paramiko.SSHException, socket.error) as exc:
            raise RemoteConnectionError(f"Lost connection to {self.host}: {exc}") from exc
        if out.strip():
            log.debug("stdout:\n%s", out.rstrip())
        if err.strip():
            log.debug("stderr:\n%s", err.rstrip())
        return CommandResult(command=line, exit_status=status, stdout=out, stderr=err)

    def close(self) -> None:
        self._client.close()


def connect(server: ServerDescriptor, *, timeout: float) -> SSHShell:
    """Open an SSH session to ``server``.

    A password selects password authentication; otherwise keys from the
    agent and ``~/.ssh`` are tried. Unknown host keys are accepted.
    """
    client = paramiko.SSHClient()
    client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
    kwargs: dict = {
        "hostname": server.host,
        "username": server.user,
        "timeout": timeout,
        "banner_timeout": timeout,
        "auth_timeout": timeout,
    }
    if server.uses_password:
        kwargs.update(password=server.password, allow_agent=False, look_for_keys=False)
    try:
        client.connect(**kwargs)
    except (paramiko.SSHException, socket.error) as exc:
        client.close()
        raise RemoteConnectionError(
            f"Could not connect to {server.user}@{server.host}: {exc}"
        ) from exc
    return SSHShell(client, host=server.host, user=server.user)


@contextmanager
def open_shell(server: ServerDescriptor, *, timeout: float) -> Generator[RemoteShell, None, None]:
    """Context manager yielding a connected shell that is always closed."""
    shell = connect(server, timeout=timeout)
    try:
        yield shell
    finally:
        shell.close()
