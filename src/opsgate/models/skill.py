"""Skill models — catalogued infrastructure operations, read-only to the gate."""

from __future__ import annotations

import enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from opsgate.models.risk import RiskLevel


class ExecutionType(str, enum.Enum):
    CLI = "cli"
    API = "api"
    TERRAFORM = "terraform"
    SCRIPT = "script"


class OperationKind(str, enum.Enum):
    """Coarse classification used for blast-radius estimation."""

    READ_ONLY = "read_only"
    ROLLOUT = "rollout"
    SCALE = "scale"
    IAC_APPLY = "iac_apply"
    BULK = "bulk"
    OTHER = "other"


class SkillInput(BaseModel):
    name: str
    type: str = "string"
    required: bool = False
    description: str = ""
    default: str = ""


class SkillOutput(BaseModel):
    name: str
    type: str = "string"
    description: str = ""


class ExecutionConfig(BaseModel):
    type: ExecutionType = ExecutionType.CLI
    command: str = ""
    timeout: float = Field(default=60.0, gt=0, description="Seconds")


class RollbackConfig(BaseModel):
    supported: bool = False
    procedure: str = ""


class Skill(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    provider: str = "custom"
    category: str = ""
    inputs: list[SkillInput] = Field(default_factory=list)
    outputs: list[SkillOutput] = Field(default_factory=list)
    risk_level: RiskLevel = RiskLevel.LOW
    requires_confirmation: bool = False
    execution: ExecutionConfig = Field(default_factory=ExecutionConfig)
    rollback: RollbackConfig = Field(default_factory=RollbackConfig)
    operation: Optional[OperationKind] = None

    def required_inputs(self) -> list[str]:
        return [i.name for i in self.inputs if i.required]
