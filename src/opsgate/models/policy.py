"""Policy models — guardrail rules and the result of evaluating them."""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field

from opsgate.models.skill import Skill

# (skill, params, env) -> (violated, reason)
PolicyCheck = Callable[[Skill, dict[str, Any], str], tuple[bool, str]]


class EnforcementLevel(str, enum.Enum):
    WARN = "warn"
    DENY = "deny"


class Severity(str, enum.Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


class Policy(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    enforcement: EnforcementLevel = EnforcementLevel.WARN
    severity: Severity = Severity.WARNING
    applies_to: tuple[str, ...] = ()
    environments: tuple[str, ...] = ()
    check: PolicyCheck = Field(exclude=True, repr=False)


class Violation(BaseModel):
    policy_name: str
    description: str = ""
    severity: Severity
    enforcement: EnforcementLevel
    reason: str
    skill_name: str
    environment: str
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )


class EvaluationResult(BaseModel):
    passed: bool = True
    denied: bool = False
    violations: list[Violation] = Field(default_factory=list)
    warnings: list[Violation] = Field(default_factory=list)

    def policy_names(self) -> list[str]:
        return [v.policy_name for v in self.violations + self.warnings]
