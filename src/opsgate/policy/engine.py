"""Policy engine — runs guardrail rules against a skill execution request."""

from __future__ import annotations

import logging
import threading
from typing import Any, Iterable, Optional

from opsgate.exceptions import InvalidInputError, NotFoundError
from opsgate.models.policy import EnforcementLevel, EvaluationResult, Policy, Violation
from opsgate.models.skill import Skill
from opsgate.policy.builtin_policies import Clock, builtin_policies
from opsgate.policy.patterns import matches_any

logger = logging.getLogger(__name__)


class PolicyEngine:
    """Ordered collection of guardrails evaluated under one global enforcement mode.

    The global mode is the effective enforcement of every triggered rule: a
    warn-mode engine never denies and a deny-mode engine denies every
    violation, whatever the rule declares for itself. A rule's own
    ``enforcement`` is kept on the violation record for display only.
    """

    def __init__(self, enforcement_mode: EnforcementLevel = EnforcementLevel.WARN) -> None:
        self._enforcement_mode = EnforcementLevel(enforcement_mode)
        self._policies: list[Policy] = []
        self._lock = threading.Lock()

    @property
    def enforcement_mode(self) -> EnforcementLevel:
        return self._enforcement_mode

    def register(self, policy: Policy) -> None:
        with self._lock:
            if any(p.name == policy.name for p in self._policies):
                raise InvalidInputError(
                    f"Policy already registered: {policy.name}", field="name"
                )
            self._policies.append(policy)

    def load_builtins(
        self,
        enabled: Optional[Iterable[str]] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        policies = builtin_policies(clock)
        if enabled:
            by_name = {p.name: p for p in policies}
            wanted = list(enabled)
            unknown = [name for name in wanted if name not in by_name]
            if unknown:
                raise NotFoundError(f"Unknown built-in policies: {', '.join(unknown)}")
            policies = [p for p in policies if p.name in wanted]

        for policy in policies:
            self.register(policy)

    def list_policies(self) -> list[Policy]:
        with self._lock:
            return list(self._policies)

    def get_policy(self, name: str) -> Policy:
        for policy in self.list_policies():
            if policy.name == name:
                return policy
        raise NotFoundError(f"Policy not found: {name}")

    def evaluate(self, skill: Skill, params: Optional[dict[str, Any]], env: str) -> EvaluationResult:
        params = params or {}
        result = EvaluationResult()

        for policy in self.list_policies():
            if not self._applies(policy, skill, env):
                continue

            violated, reason = self._run_check(policy, skill, params, env)
            if not violated:
                continue

            violation = Violation(
                policy_name=policy.name,
                description=policy.description,
                severity=policy.severity,
                enforcement=policy.enforcement,
                reason=reason,
                skill_name=skill.name,
                environment=env,
            )

            if self._enforcement_mode == EnforcementLevel.DENY:
                result.violations.append(violation)
                result.passed = False
                result.denied = True
            else:
                result.warnings.append(violation)

        logger.debug(
            "Policy evaluation for %s in %s: %d violation(s), %d warning(s)",
            skill.name, env, len(result.violations), len(result.warnings),
        )
        return result

    @staticmethod
    def _applies(policy: Policy, skill: Skill, env: str) -> bool:
        if policy.applies_to and not matches_any(skill.name, policy.applies_to):
            return False
        if policy.environments and env.lower() not in {e.lower() for e in policy.environments}:
            return False
        return True

    @staticmethod
    def _run_check(
        policy: Policy, skill: Skill, params: dict[str, Any], env: str
    ) -> tuple[bool, str]:
        # Rule faults count as "not violated".
        try:
            violated, reason = policy.check(skill, params, env)
        except Exception:
            logger.exception("Policy %s failed while checking %s", policy.name, skill.name)
            return False, ""
        return bool(violated), reason
