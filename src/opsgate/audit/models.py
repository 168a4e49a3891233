"""Pydantic models for audit log records."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


class DecisionRecord(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    skill_name: str
    environment: str
    username: str = ""
    state: str
    risk_level: Optional[int] = None
    blast_radius: int = 0
    reason: str = ""
    command: str = ""
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )


class ViolationRecord(BaseModel):
    decision_id: str
    policy_name: str
    severity: str
    enforcement: str
    blocking: bool = False
    reason: str = ""


class ExecutionRecord(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    decision_id: str
    status: str
    exit_code: Optional[int] = None
    output: str = ""
    error: str = ""
    duration: float = 0.0
    executed_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
