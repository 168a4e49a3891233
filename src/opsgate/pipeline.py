"""Pipeline orchestrator — wires catalog → gate → execute → audit."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from opsgate.audit.store import AuditStore
from opsgate.catalog.registry import SkillCatalog, apply_defaults, validate_params
from opsgate.executor.skill_executor import SkillExecutor
from opsgate.gate import ExecutionGate
from opsgate.exceptions import ExecutionError
from opsgate.models.decision import ExecutionDecision, ExecutionResult, ExecutionStatus, GateState

logger = logging.getLogger(__name__)


class Pipeline:
    def __init__(
        self,
        catalog: SkillCatalog,
        gate: ExecutionGate,
        executor: SkillExecutor,
        store: AuditStore,
        default_environment: str = "staging",
        command_timeout: Optional[float] = None,
    ) -> None:
        self._catalog = catalog
        self._gate = gate
        self._executor = executor
        self._store = store
        self._default_env = default_environment
        self._timeout = command_timeout

    @property
    def catalog(self) -> SkillCatalog:
        return self._catalog

    @property
    def gate(self) -> ExecutionGate:
        return self._gate

    @property
    def default_environment(self) -> str:
        return self._default_env

    @property
    def store(self) -> AuditStore:
        return self._store

    async def run(
        self,
        skill_name: str,
        params: Optional[Mapping[str, Any]] = None,
        env: Optional[str] = None,
        username: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> tuple[ExecutionDecision, Optional[ExecutionResult]]:
        # 1. Resolve skill and check inputs
        skill = self._catalog.get(skill_name)
        params = apply_defaults(skill, params)
        validate_params(skill, params)
        env = env or self._default_env

        # 2. Gate
        decision = self._gate.evaluate(skill, params, env, username=username)
        record = await self._store.log_decision(decision, username=username)

        # 3. Dry run: render what would run
        if decision.state == GateState.DRY_RUN:
            result = self._executor.preview(skill, params, env)
            await self._store.log_execution(record.id, result)
            return decision, result

        if decision.state != GateState.ADMITTED:
            return decision, None

        # 4. Execute
        try:
            result = await self._executor.execute(
                skill, params, env, timeout=timeout or self._timeout
            )
        except ExecutionError as exc:
            await self._store.log_execution(
                record.id,
                ExecutionResult(
                    skill_name=skill.name,
                    status=ExecutionStatus.FAILED,
                    command=decision.interpolated_command,
                    message=str(exc),
                ),
            )
            raise
        logger.info("Executed %s in %s: %s", skill.name, env, result.status.value)

        # 5. Log result
        await self._store.log_execution(record.id, result)
        return decision, result
