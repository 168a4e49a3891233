"""Gate and execution models — what the gate decides and what the executor reports."""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from opsgate.models.policy import EvaluationResult
from opsgate.models.safety import SafetyReport


class GateState(str, enum.Enum):
    DENIED = "denied"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    DRY_RUN = "dry_run"
    ADMITTED = "admitted"


class ExecutionDecision(BaseModel):
    skill_name: str
    environment: str
    state: GateState
    report: Optional[SafetyReport] = None
    policy_result: EvaluationResult = Field(default_factory=EvaluationResult)
    interpolated_command: str = ""
    reason: str = ""
    required_phrase: str = ""

    @property
    def admitted(self) -> bool:
        return self.state == GateState.ADMITTED


class ExecutionStatus(str, enum.Enum):
    SUCCESS = "success"
    FAILED = "failed"
    DRY_RUN = "dry_run"
    CANCELLED = "cancelled"
    PENDING = "pending"


class ExecutionResult(BaseModel):
    skill_name: str
    status: ExecutionStatus
    command: str = ""
    stdout: str = ""
    stderr: str = ""
    exit_code: Optional[int] = None
    message: str = ""
    duration: float = 0.0
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @property
    def success(self) -> bool:
        return self.status in (ExecutionStatus.SUCCESS, ExecutionStatus.DRY_RUN)
