"""Per-step and per-server provisioning outcomes."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class StepStatus(str, Enum):
    OK = "ok"
    WARNING = "warning"
    FATAL = "fatal"
    SKIPPED = "skipped"


class StepResult(BaseModel):
    """Outcome of one provisioning step."""

    name: str
    status: StepStatus = StepStatus.OK
    warnings: list[str] = Field(default_factory=list)
    detail: Optional[str] = None

    @property
    def is_fatal(self) -> bool:
        return self.status is StepStatus.FATAL


class ServerReport(BaseModel):
    """Everything that happened to one server during a run."""

    name: str
    host: str
    domain_or_ip: str
    steps: list[StepResult] = Field(default_factory=list)
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and not any(step.is_fatal for step in self.steps)

    @property
    def warning_count(self) -> int:
        return sum(len(step.warnings) for step in self.steps)

    @property
    def status(self) -> str:
        if not self.succeeded:
            return "failed"
        return "warnings" if self.warning_count else "ok"
