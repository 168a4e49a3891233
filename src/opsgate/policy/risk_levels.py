"""Risk classification helpers."""

from __future__ import annotations

from typing import Optional

from opsgate.exceptions import InvalidRiskLevelError
from opsgate.models.risk import RiskLevel

# Typed phrases rather than a yes/no so destructive actions cannot be
# confirmed by reflex.
CONFIRMATION_PHRASES: dict[RiskLevel, Optional[str]] = {
    RiskLevel.LOW: None,
    RiskLevel.MEDIUM: "yes",
    RiskLevel.HIGH: "yes, apply",
    RiskLevel.CRITICAL: "CONFIRM PRODUCTION",
}


def risk_from_string(value: str) -> RiskLevel:
    try:
        return RiskLevel[value.strip().upper()]
    except KeyError:
        raise InvalidRiskLevelError(value) from None


def compare_risk(a: RiskLevel, b: RiskLevel) -> int:
    return (a > b) - (a < b)


def max_risk(a: RiskLevel, b: RiskLevel) -> RiskLevel:
    return a if a >= b else b


def requires_user_confirmation(level: RiskLevel) -> bool:
    return level >= RiskLevel.MEDIUM


def confirmation_phrase(level: RiskLevel) -> Optional[str]:
    return CONFIRMATION_PHRASES[level]


def confirmation_prompt(level: RiskLevel) -> str:
    phrase = confirmation_phrase(level)
    if phrase is None:
        return ""
    return f'Type "{phrase}" to proceed or "cancel" to abort'
