"""Pydantic models."""

from supahost.models.report import ServerReport, StepResult, StepStatus
from supahost.models.server import ServerDescriptor

__all__ = ["ServerDescriptor", "ServerReport", "StepResult", "StepStatus"]
