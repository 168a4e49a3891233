"""Entry point and dependency wiring."""

from __future__ import annotations

import logging
from typing import Optional

from opsgate.audit.store import AuditStore
from opsgate.catalog.registry import SkillCatalog
from opsgate.cli.app import app
from opsgate.config.settings import Settings
from opsgate.executor.skill_executor import SkillExecutor
from opsgate.gate import ExecutionGate
from opsgate.pipeline import Pipeline
from opsgate.policy.authorization import AuthorizationEngine
from opsgate.policy.engine import PolicyEngine
from opsgate.policy.safety import SafetyEvaluator


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_authorization(settings: Settings) -> AuthorizationEngine:
    authorization = AuthorizationEngine(enabled=settings.rbac_enabled)
    for username, role in settings.users.items():
        authorization.add_user(username, role)
    return authorization


def build_pipeline(
    dry_run: bool = False,
    strict: Optional[bool] = None,
    settings: Settings | None = None,
) -> Pipeline:
    settings = settings or Settings()  # type: ignore[call-arg]

    catalog = SkillCatalog()
    catalog.load_builtins()

    policy_engine = PolicyEngine(enforcement_mode=settings.enforcement_mode)
    policy_engine.load_builtins(enabled=settings.enabled_policies or None)

    gate = ExecutionGate(
        policy_engine=policy_engine,
        safety=SafetyEvaluator(),
        authorization=build_authorization(settings),
        dry_run=dry_run or settings.dry_run,
        strict_confirmation=settings.strict_confirmation if strict is None else strict,
    )

    return Pipeline(
        catalog=catalog,
        gate=gate,
        executor=SkillExecutor(),
        store=AuditStore(db_path=settings.db_path),
        default_environment=settings.default_environment,
        command_timeout=settings.command_timeout,
    )


if __name__ == "__main__":
    app()
