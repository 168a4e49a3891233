"""Permission matrix — maps each Role to what it may run, where, and approve."""

from __future__ import annotations

from opsgate.models.rbac import Permission, Role
from opsgate.models.risk import RiskLevel

DEFAULT_PERMISSIONS: dict[Role, Permission] = {
    Role.VIEWER: Permission(
        allowed_risk_levels=frozenset({RiskLevel.LOW}),
        allowed_environments=("staging", "dev"),
    ),
    Role.OPERATOR: Permission(
        allowed_risk_levels=frozenset({RiskLevel.LOW, RiskLevel.MEDIUM}),
        allowed_environments=("staging", "dev", "qa"),
    ),
    Role.ADMIN: Permission(
        allowed_risk_levels=frozenset({RiskLevel.LOW, RiskLevel.MEDIUM, RiskLevel.HIGH}),
        allowed_environments=("staging", "dev", "qa", "production"),
        can_approve=True,
        can_manage_policies=True,
    ),
    Role.SUPERADMIN: Permission(
        allowed_risk_levels=frozenset(RiskLevel),
        allowed_environments=(),
        can_approve=True,
        can_manage_policies=True,
        can_manage_users=True,
    ),
}
