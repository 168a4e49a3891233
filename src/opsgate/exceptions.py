"""Custom exception hierarchy for opsgate."""

from __future__ import annotations


class OpsGateError(Exception):
    """Base exception for all opsgate errors."""


class NotFoundError(OpsGateError):
    """Raised when a skill, user or policy does not exist."""


class InvalidInputError(OpsGateError):
    """Raised when caller input is malformed or a required field is missing."""

    def __init__(self, message: str, field: str = "") -> None:
        super().__init__(message)
        self.field = field


class InvalidRiskLevelError(InvalidInputError):
    """Raised when a risk level string cannot be parsed."""

    def __init__(self, value: str) -> None:
        super().__init__(f"Unknown risk level: {value}", field="risk_level")
        self.value = value


class ExecutionError(OpsGateError):
    """Raised when skill execution fails."""

    def __init__(self, message: str, skill_name: str = "") -> None:
        super().__init__(message)
        self.skill_name = skill_name


class UserCancelledError(OpsGateError):
    """Raised when the user cancels a confirmation prompt."""
