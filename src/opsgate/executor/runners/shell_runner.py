"""Shell runner — executes a skill's interpolated command line."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

import psutil

from opsgate.exceptions import ExecutionError
from opsgate.executor.runners.base import BaseRunner
from opsgate.models.decision import ExecutionResult, ExecutionStatus
from opsgate.models.skill import Skill

logger = logging.getLogger(__name__)

MAX_MESSAGE_OUTPUT = 200


def _truncate(text: str, limit: int = MAX_MESSAGE_OUTPUT) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def kill_process_tree(pid: int) -> None:
    try:
        parent = psutil.Process(pid)
    except psutil.NoSuchProcess:
        return
    for proc in parent.children(recursive=True) + [parent]:
        try:
            proc.kill()
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            continue


class ShellRunner(BaseRunner):
    def __init__(self, work_dir: Optional[str] = None) -> None:
        self._work_dir = work_dir

    async def run(
        self, skill: Skill, command: str, timeout: Optional[float] = None
    ) -> ExecutionResult:
        timeout = timeout or skill.execution.timeout
        start = time.monotonic()
        logger.debug("Running %s: %s (timeout %.0fs)", skill.name, command, timeout)

        try:
            proc = await asyncio.create_subprocess_shell(
                command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=self._work_dir,
            )
        except OSError as exc:
            raise ExecutionError(
                f"Failed to start command for {skill.name}: {exc}",
                skill_name=skill.name,
            ) from exc

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            kill_process_tree(proc.pid)
            await proc.wait()
            return ExecutionResult(
                skill_name=skill.name,
                status=ExecutionStatus.FAILED,
                command=command,
                exit_code=proc.returncode,
                message=f"Command timed out after {timeout:.0f}s",
                duration=time.monotonic() - start,
            )

        duration = time.monotonic() - start
        out = stdout.decode(errors="replace")
        err = stderr.decode(errors="replace")

        if proc.returncode != 0:
            return ExecutionResult(
                skill_name=skill.name,
                status=ExecutionStatus.FAILED,
                command=command,
                stdout=out,
                stderr=err,
                exit_code=proc.returncode,
                message=f"Command failed (exit {proc.returncode}): {_truncate(err)}",
                duration=duration,
            )

        return ExecutionResult(
            skill_name=skill.name,
            status=ExecutionStatus.SUCCESS,
            command=command,
            stdout=out,
            stderr=err,
            exit_code=0,
            message=f"Completed successfully in {duration * 1000:.0f}ms",
            duration=duration,
        )
