"""Risk scale shared by every stage of the gate."""

from __future__ import annotations

import enum


class RiskLevel(int, enum.Enum):
    LOW = 0
    MEDIUM = 1
    HIGH = 2
    CRITICAL = 3

    def __str__(self) -> str:
        return self.name
