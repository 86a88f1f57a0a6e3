"""Best-effort command execution for a single provisioning step."""

from __future__ import annotations

import logging
from typing import Optional, Union

from supahost.models import StepResult, StepStatus
from supahost.services.remote import Command, CommandResult, RemoteShell


class StepRunner:
    """Runs commands for one step, turning failures into step warnings.

    A failed command is logged with its exit status and recorded; the step
    carries on. Only the caller decides when a step is fatal.
    """

    def __init__(self, name: str, shell: RemoteShell, log: Union[logging.Logger, logging.LoggerAdapter]):
        self.name = name
        self.shell = shell
        self.log = log
        self.warnings: list[str] = []

    def sudo(self, command: Command, *, input: Optional[str] = None) -> CommandResult:
        return self._check(self.shell.run(command, sudo=True, input=input))

    def user(self, command: Command, *, input: Optional[str] = None) -> CommandResult:
        return self._check(self.shell.run(command, input=input))

    def write_file(self, path: str, content: str, *, sudo: bool = False) -> CommandResult:
        return self._check(self.shell.write_file(path, content, sudo=sudo))

    def warn(self, message: str) -> None:
        self.log.warning(message)
        self.warnings.append(message)

    def _check(self, result: CommandResult) -> CommandResult:
        if not result.ok:
            message = f"Command '{result.command}' failed with status {result.exit_status}"
            self.log.error(message)
            if result.stderr.strip():
                self.log.debug("stderr:\n%s", result.stderr.rstrip())
            self.warnings.append(message)
        return result

    def result(self) -> StepResult:
        status = StepStatus.WARNING if self.warnings else StepStatus.OK
        return StepResult(name=self.name, status=status, warnings=list(self.warnings))

    def fatal(self, message: str, *, detail: Optional[str] = None) -> StepResult:
        self.log.error(message)
        return StepResult(
            name=self.name,
            status=StepStatus.FATAL,
            warnings=[*self.warnings, message],
            detail=detail,
        )
