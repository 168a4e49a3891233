"""Abstract base for command runners."""

from __future__ import annotations

import abc
from typing import Optional

from opsgate.models.decision import ExecutionResult
from opsgate.models.skill import Skill


class BaseRunner(abc.ABC):
    @abc.abstractmethod
    async def run(
        self, skill: Skill, command: str, timeout: Optional[float] = None
    ) -> ExecutionResult:
        ...  # pragma: no cover
