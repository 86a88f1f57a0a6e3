"""Server descriptor model."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from supahost.constants import DEFAULT_CERTBOT_EMAIL, DEFAULT_SUPABASE_PATH


class ServerDescriptor(BaseModel):
    """One deployment target read from the inventory."""

    model_config = ConfigDict(frozen=True)

    name: str
    host: str
    user: str
    password: Optional[str] = None
    domain_or_ip: str
    certbot_email: str = DEFAULT_CERTBOT_EMAIL
    supabase_path: str = DEFAULT_SUPABASE_PATH
    enable_ufw: bool = True

    @field_validator("password", mode="before")
    @classmethod
    def _empty_password_is_absent(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @field_validator("certbot_email", mode="before")
    @classmethod
    def _default_email(cls, value: Optional[str]) -> str:
        return value or DEFAULT_CERTBOT_EMAIL

    @field_validator("supabase_path", mode="before")
    @classmethod
    def _default_path(cls, value: Optional[str]) -> str:
        return value or DEFAULT_SUPABASE_PATH

    @field_validator("enable_ufw", mode="before")
    @classmethod
    def _default_ufw(cls, value: Optional[bool]) -> bool:
        return True if value is None else value

    @property
    def uses_password(self) -> bool:
        return self.password is not None

    @property
    def docker_dir(self) -> str:
        return f"{self.supabase_path.rstrip('/')}/docker"

    @property
    def compose_file(self) -> str:
        return f"{self.docker_dir}/docker-compose.yml"
