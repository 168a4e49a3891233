"""RBAC models — roles, their permissions and the users holding them."""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field

from opsgate.models.risk import RiskLevel


class Role(str, enum.Enum):
    VIEWER = "viewer"
    OPERATOR = "operator"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


class Permission(BaseModel):
    model_config = ConfigDict(frozen=True)

    allowed_risk_levels: frozenset[RiskLevel] = frozenset()
    # Empty means every environment.
    allowed_environments: tuple[str, ...] = ()
    deny_skill_patterns: tuple[str, ...] = ()
    can_approve: bool = False
    can_manage_policies: bool = False
    can_manage_users: bool = False


class User(BaseModel):
    username: str
    role: Role
    teams: list[str] = Field(default_factory=list)
