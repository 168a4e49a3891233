"""Role-based authorization for skills and environments."""

from __future__ import annotations

import logging
import threading
from typing import Iterable, Optional, Union

from opsgate.exceptions import InvalidInputError, NotFoundError
from opsgate.models.rbac import Permission, Role, User
from opsgate.models.risk import RiskLevel
from opsgate.models.skill import Skill
from opsgate.policy.patterns import match_skill_pattern
from opsgate.policy.permissions import DEFAULT_PERMISSIONS

logger = logging.getLogger(__name__)


def _role(value: Union[Role, str]) -> Role:
    try:
        return Role(value.lower() if isinstance(value, str) else value)
    except ValueError:
        raise InvalidInputError(f"Unknown role: {value}", field="role") from None


class AuthorizationEngine:
    """Maps users to roles and roles to permissions.

    The role table is fixed at construction. Users can be added and removed
    at runtime; every read and write goes through one lock.
    """

    def __init__(
        self,
        enabled: bool = True,
        permissions: Optional[dict[Role, Permission]] = None,
    ) -> None:
        self._enabled = enabled
        self._permissions = dict(DEFAULT_PERMISSIONS if permissions is None else permissions)
        self._users: dict[str, User] = {}
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def add_user(
        self, username: str, role: Union[Role, str], teams: Iterable[str] = ()
    ) -> User:
        if not username:
            raise InvalidInputError("Username must not be empty", field="username")
        user = User(username=username, role=_role(role), teams=list(teams))
        with self._lock:
            self._users[username] = user
        logger.info("Assigned role %s to %s", user.role.value, username)
        return user

    def remove_user(self, username: str) -> None:
        with self._lock:
            if self._users.pop(username, None) is None:
                raise NotFoundError(f"user not found: {username}")
        logger.info("Removed user %s", username)

    def get_user(self, username: str) -> User:
        with self._lock:
            user = self._users.get(username)
        if user is None:
            raise NotFoundError(f"user not found: {username}")
        return user

    def list_users(self) -> list[User]:
        with self._lock:
            return sorted(self._users.values(), key=lambda u: u.username)

    def permission_for(self, role: Role) -> Optional[Permission]:
        return self._permissions.get(role)

    def can_execute(
        self,
        username: str,
        skill: Skill,
        env: str,
        risk_level: Optional[RiskLevel] = None,
    ) -> tuple[bool, str]:
        """Decide whether ``username`` may run ``skill`` in ``env``.

        ``risk_level`` overrides the skill's intrinsic level, which is how the
        gate passes the environment-escalated risk.
        """
        if not self._enabled:
            return True, ""

        try:
            user = self.get_user(username)
        except NotFoundError as exc:
            return False, f"Access denied: {exc}"

        perm = self.permission_for(user.role)
        if perm is None:
            return False, f"No permissions defined for role: {user.role.value}"

        risk = skill.risk_level if risk_level is None else risk_level
        if risk not in perm.allowed_risk_levels:
            return False, f"Role '{user.role.value}' cannot execute {risk.name}-risk operations"

        if perm.allowed_environments and env.lower() not in {
            e.lower() for e in perm.allowed_environments
        }:
            return False, f"Role '{user.role.value}' cannot access environment '{env}'"

        for pattern in perm.deny_skill_patterns:
            if match_skill_pattern(skill.name, pattern):
                return False, f"Skill '{skill.name}' is denied for role '{user.role.value}'"

        return True, ""

    def can_approve(self, username: str) -> bool:
        return self._flag(username, "can_approve")

    def can_manage_policies(self, username: str) -> bool:
        return self._flag(username, "can_manage_policies")

    def can_manage_users(self, username: str) -> bool:
        return self._flag(username, "can_manage_users")

    def _flag(self, username: str, name: str) -> bool:
        if not self._enabled:
            return True
        try:
            user = self.get_user(username)
        except NotFoundError:
            return False
        perm = self.permission_for(user.role)
        if perm is None:
            return False
        return getattr(perm, name)
