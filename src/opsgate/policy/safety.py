"""Safety evaluator — blast radius, environment escalation and confirmation needs."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional

from opsgate.models.risk import RiskLevel
from opsgate.models.safety import SafetyReport
from opsgate.models.skill import OperationKind, Skill
from opsgate.policy.params import int_param
from opsgate.policy.risk_levels import confirmation_prompt, max_risk

PRODUCTION_ENVIRONMENTS = frozenset({"production", "prod", "prd"})

PRODUCTION_WARNING = "TARGET ENVIRONMENT IS PRODUCTION — exercise extreme caution"

# Name heuristic, used only when a skill does not declare its operation.
# Order matters: the first matching row wins.
OPERATION_NAME_HINTS: list[tuple[OperationKind, tuple[str, ...]]] = [
    (OperationKind.READ_ONLY, (".list", ".audit", ".query", ".report", ".status", ".snapshot")),
    (OperationKind.ROLLOUT, (".deploy", ".upgrade")),
    (OperationKind.SCALE, (".scale",)),
    (OperationKind.IAC_APPLY, ("terraform.apply",)),
    (OperationKind.BULK, (".sync", ".migrate")),
]


def _from_param(key: str, fallback: int) -> Callable[[Mapping[str, Any]], int]:
    def estimate(params: Mapping[str, Any]) -> int:
        value = int_param(params, key)
        return fallback if value is None else value

    return estimate


BLAST_RADIUS: dict[OperationKind, Callable[[Mapping[str, Any]], int]] = {
    OperationKind.READ_ONLY: lambda params: 0,
    OperationKind.ROLLOUT: lambda params: 1,
    OperationKind.SCALE: _from_param("desired_capacity", 1),
    OperationKind.IAC_APPLY: _from_param("resources_count", 5),
    OperationKind.BULK: lambda params: 10,
    OperationKind.OTHER: lambda params: 1,
}

RESOURCE_KEYS = (
    "instance_id", "bucket_name", "vpc_id", "deployment", "function_name",
    "asg_name", "secret_id", "release_name", "app_name", "vm_name", "zone", "image",
)

DESTRUCTIVE_KEYWORDS = (
    "apply", "deploy", "scale", "resize", "delete",
    "rotate", "sync", "migrate", "update", "upgrade", "rollback",
)


def classify_operation(skill: Skill) -> OperationKind:
    if skill.operation is not None:
        return skill.operation
    for kind, hints in OPERATION_NAME_HINTS:
        if any(hint in skill.name for hint in hints):
            return kind
    return OperationKind.OTHER


def is_production(env: str) -> bool:
    return env.strip().lower() in PRODUCTION_ENVIRONMENTS


class SafetyEvaluator:
    """Builds a fresh SafetyReport for every request; nothing is cached."""

    def evaluate(
        self, skill: Skill, params: Optional[Mapping[str, Any]], env: str
    ) -> SafetyReport:
        params = params or {}
        risk = skill.risk_level
        requires_confirmation = skill.requires_confirmation
        warning = ""

        if is_production(env):
            risk = max_risk(risk, RiskLevel.HIGH)
            requires_confirmation = True
            warning = PRODUCTION_WARNING

        return SafetyReport(
            skill_name=skill.name,
            risk_level=risk,
            blast_radius=self.estimate_blast_radius(skill, params),
            affected_resources=self.affected_resources(skill, params),
            requires_confirmation=requires_confirmation,
            confirmation_prompt=confirmation_prompt(risk),
            rollback_available=skill.rollback.supported,
            rollback_procedure=skill.rollback.procedure,
            dry_run_recommended=self.should_dry_run(skill),
            environment_warning=warning,
        )

    @staticmethod
    def estimate_blast_radius(skill: Skill, params: Mapping[str, Any]) -> int:
        return BLAST_RADIUS[classify_operation(skill)](params)

    @staticmethod
    def affected_resources(skill: Skill, params: Mapping[str, Any]) -> list[str]:
        resources = [f"{skill.provider}/{skill.category} resources"]
        resources.extend(f"{key}={params[key]}" for key in RESOURCE_KEYS if key in params)
        return resources

    @staticmethod
    def should_dry_run(skill: Skill) -> bool:
        name = skill.name.lower()
        return any(keyword in name for keyword in DESTRUCTIVE_KEYWORDS)
