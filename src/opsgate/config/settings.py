"""Application settings loaded from environment variables."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from opsgate.models.policy import EnforcementLevel
from opsgate.models.rbac import Role


class Settings(BaseSettings):
    model_config = {"env_prefix": "OPSGATE_"}

    enforcement_mode: EnforcementLevel = Field(
        default=EnforcementLevel.WARN,
        description="Global policy enforcement mode (warn/deny)",
    )
    enabled_policies: list[str] = Field(
        default_factory=list,
        description="Built-in policies to load; empty loads all of them",
    )
    rbac_enabled: bool = Field(default=False, description="Enforce role-based access control")
    users: dict[str, Role] = Field(
        default_factory=dict,
        description="Username to role assignments (JSON object)",
    )
    dry_run: bool = Field(default=False, description="Global dry-run mode")
    strict_confirmation: bool = Field(
        default=False,
        description="Require the typed phrase instead of a bare confirmation flag",
    )
    default_environment: str = Field(default="staging", description="Environment used when none is given")
    command_timeout: Optional[float] = Field(
        default=None, gt=0, description="Executor timeout in seconds; overrides per-skill timeouts"
    )
    db_path: Path = Field(
        default=Path.home() / ".opsgate" / "audit.db",
        description="SQLite audit database path",
    )
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("enforcement_mode", mode="before")
    @classmethod
    def _lower_mode(cls, value):
        return value.lower() if isinstance(value, str) else value

    @field_validator("users", mode="before")
    @classmethod
    def _lower_roles(cls, value):
        if isinstance(value, dict):
            return {k: v.lower() if isinstance(v, str) else v for k, v in value.items()}
        return value
