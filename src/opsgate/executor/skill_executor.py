"""Skill executor — dispatches admitted skills to the appropriate runner."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from opsgate.exceptions import ExecutionError
from opsgate.executor.runners.base import BaseRunner
from opsgate.executor.runners.shell_runner import ShellRunner
from opsgate.gate import interpolate_command
from opsgate.models.decision import ExecutionResult, ExecutionStatus
from opsgate.models.skill import ExecutionType, Skill

_RUNNER_MAP: dict[ExecutionType, type[BaseRunner]] = {
    ExecutionType.CLI: ShellRunner,
    ExecutionType.SCRIPT: ShellRunner,
    ExecutionType.TERRAFORM: ShellRunner,
}


class SkillExecutor:
    def __init__(self) -> None:
        self._runners: dict[ExecutionType, BaseRunner] = {}

    def _get_runner(self, skill: Skill) -> BaseRunner:
        execution_type = skill.execution.type
        if execution_type not in self._runners:
            runner_cls = _RUNNER_MAP.get(execution_type)
            if runner_cls is None:
                raise ExecutionError(
                    f"No runner registered for {execution_type.value} skills",
                    skill_name=skill.name,
                )
            self._runners[execution_type] = runner_cls()
        return self._runners[execution_type]

    async def execute(
        self,
        skill: Skill,
        params: Optional[Mapping[str, Any]],
        env: str,
        timeout: Optional[float] = None,
    ) -> ExecutionResult:
        runner = self._get_runner(skill)
        command = interpolate_command(skill.execution.command, params)
        return await runner.run(skill, command, timeout=timeout)

    def preview(
        self, skill: Skill, params: Optional[Mapping[str, Any]], env: str
    ) -> ExecutionResult:
        command = interpolate_command(skill.execution.command, params)
        return ExecutionResult(
            skill_name=skill.name,
            status=ExecutionStatus.DRY_RUN,
            command=command,
            message=f"[DRY RUN] Would execute: {command} (env={env}, risk={skill.risk_level.name})",
        )
