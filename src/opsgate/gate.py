"""Execution gate — turns policy, safety and RBAC verdicts into one decision.

One request makes a single pass through the stages below and ends in exactly
one terminal state:

1. policy engine: a deny-effective violation ends in DENIED;
2. safety evaluator: computes the (possibly escalated) risk;
3. RBAC, when enabled and a caller is named: a refusal ends in DENIED;
4. a confirmation requirement without a matching token ends in
   AWAITING_CONFIRMATION;
5. global dry-run, or a recommended dry-run without ``_force``, ends in DRY_RUN;
6. everything else is ADMITTED.

The gate only decides. Running the command is the executor's job.
"""

from __future__ import annotations

import logging
import re
import shlex
from typing import Any, Mapping, Optional

from opsgate.models.decision import ExecutionDecision, GateState
from opsgate.models.policy import EvaluationResult
from opsgate.models.risk import RiskLevel
from opsgate.models.safety import SafetyReport
from opsgate.models.skill import Skill
from opsgate.policy.authorization import AuthorizationEngine
from opsgate.policy.engine import PolicyEngine
from opsgate.policy.params import flag_param, format_param
from opsgate.policy.risk_levels import confirmation_phrase
from opsgate.policy.safety import SafetyEvaluator

logger = logging.getLogger(__name__)

CONFIRMED_PARAM = "_confirmed"
FORCE_PARAM = "_force"

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


def interpolate_command(template: str, params: Optional[Mapping[str, Any]]) -> str:
    """Replace ``{key}`` placeholders in ``template`` with shell-quoted parameter values.

    Substitution is a single pass, so placeholder text inside a value is left
    as data. Unknown placeholders are kept verbatim.
    """
    params = params or {}

    def substitute(match: re.Match) -> str:
        key = match.group(1)
        if key not in params:
            return match.group(0)
        return shlex.quote(format_param(params[key]))

    return _PLACEHOLDER.sub(substitute, template)


def is_confirmed(
    params: Optional[Mapping[str, Any]], risk: RiskLevel, strict: bool = False
) -> bool:
    """Check the caller's confirmation token against the phrase ``risk`` needs.

    A string token must equal the required phrase exactly. A bare ``True`` is
    accepted as well unless ``strict`` is set, in which case it only confirms
    risk levels that have no phrase.
    """
    token = (params or {}).get(CONFIRMED_PARAM)
    phrase = confirmation_phrase(risk)

    if isinstance(token, str) and token.strip().lower() not in ("true", "false"):
        return phrase is None or token.strip() == phrase

    if not flag_param(params, CONFIRMED_PARAM):
        return False
    return not strict or phrase is None


class ExecutionGate:
    def __init__(
        self,
        policy_engine: PolicyEngine,
        safety: SafetyEvaluator,
        authorization: AuthorizationEngine,
        dry_run: bool = False,
        strict_confirmation: bool = False,
    ) -> None:
        self._policies = policy_engine
        self._safety = safety
        self._authorization = authorization
        self._dry_run = dry_run
        self._strict = strict_confirmation

    @property
    def dry_run(self) -> bool:
        return self._dry_run

    @property
    def policy_engine(self) -> PolicyEngine:
        return self._policies

    @property
    def safety(self) -> SafetyEvaluator:
        return self._safety

    @property
    def authorization(self) -> AuthorizationEngine:
        return self._authorization

    def evaluate(
        self,
        skill: Skill,
        params: Optional[Mapping[str, Any]],
        env: str,
        username: Optional[str] = None,
    ) -> ExecutionDecision:
        params = dict(params or {})

        policy_result = self._policies.evaluate(skill, params, env)
        if policy_result.denied:
            names = ", ".join(v.policy_name for v in policy_result.violations)
            return self._decide(
                skill, env, GateState.DENIED,
                policy_result=policy_result,
                reason=f"Blocked by policy: {names}",
            )

        report = self._safety.evaluate(skill, params, env)

        if self._authorization.enabled and username is not None:
            allowed, reason = self._authorization.can_execute(
                username, skill, env, risk_level=report.risk_level
            )
            if not allowed:
                return self._decide(
                    skill, env, GateState.DENIED,
                    report=report, policy_result=policy_result, reason=reason,
                )

        command = interpolate_command(skill.execution.command, params)

        if report.requires_confirmation and not is_confirmed(
            params, report.risk_level, strict=self._strict
        ):
            return self._decide(
                skill, env, GateState.AWAITING_CONFIRMATION,
                report=report,
                policy_result=policy_result,
                command=command,
                reason=report.confirmation_prompt or "Action requires confirmation",
                required_phrase=confirmation_phrase(report.risk_level) or "",
            )

        if self._dry_run or (report.dry_run_recommended and not flag_param(params, FORCE_PARAM)):
            reason = (
                "Global dry-run mode is enabled"
                if self._dry_run
                else "Dry run recommended for mutating skill; pass _force=true to execute"
            )
            return self._decide(
                skill, env, GateState.DRY_RUN,
                report=report, policy_result=policy_result,
                command=command, reason=reason,
            )

        return self._decide(
            skill, env, GateState.ADMITTED,
            report=report, policy_result=policy_result, command=command,
        )

    @staticmethod
    def _decide(
        skill: Skill,
        env: str,
        state: GateState,
        report: Optional[SafetyReport] = None,
        policy_result: Optional[EvaluationResult] = None,
        command: str = "",
        reason: str = "",
        required_phrase: str = "",
    ) -> ExecutionDecision:
        decision = ExecutionDecision(
            skill_name=skill.name,
            environment=env,
            state=state,
            report=report,
            interpolated_command=command,
            reason=reason,
            required_phrase=required_phrase,
        )
        if policy_result is not None:
            decision.policy_result = policy_result
        logger.info("Gate decision for %s in %s: %s %s", skill.name, env, state.value, reason)
        return decision
