"""Safety models — output of the safety evaluator."""

from __future__ import annotations

from pydantic import BaseModel, Field

from opsgate.models.risk import RiskLevel


class SafetyReport(BaseModel):
    skill_name: str
    risk_level: RiskLevel
    blast_radius: int = 0
    affected_resources: list[str] = Field(default_factory=list)
    requires_confirmation: bool = False
    confirmation_prompt: str = ""
    rollback_available: bool = False
    rollback_procedure: str = ""
    dry_run_recommended: bool = False
    environment_warning: str = ""
