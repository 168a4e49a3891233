"""Shared fixtures and mocks for all tests."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
import pytest_asyncio

from opsgate.audit.store import AuditStore
from opsgate.catalog.registry import SkillCatalog
from opsgate.config.settings import Settings
from opsgate.executor.skill_executor import SkillExecutor
from opsgate.gate import ExecutionGate
from opsgate.models.policy import EnforcementLevel
from opsgate.models.risk import RiskLevel
from opsgate.models.skill import ExecutionConfig, ExecutionType, RollbackConfig, Skill, SkillInput
from opsgate.pipeline import Pipeline
from opsgate.policy.authorization import AuthorizationEngine
from opsgate.policy.engine import PolicyEngine
from opsgate.policy.safety import SafetyEvaluator

# A Wednesday inside the deploy window.
BUSINESS_HOURS = datetime(2024, 6, 12, 11, 0, tzinfo=timezone.utc)


@pytest.fixture
def mock_settings(monkeypatch, tmp_path):
    monkeypatch.setenv("OPSGATE_ENFORCEMENT_MODE", "warn")
    monkeypatch.setenv("OPSGATE_DRY_RUN", "false")
    monkeypatch.setenv("OPSGATE_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("OPSGATE_DB_PATH", str(tmp_path / "audit.db"))
    return Settings()  # type: ignore[call-arg]


@pytest_asyncio.fixture
async def temp_db():
    store = AuditStore(db_path=":memory:")
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
def business_hours():
    return lambda: BUSINESS_HOURS


@pytest.fixture
def catalog():
    c = SkillCatalog()
    c.load_builtins()
    return c


@pytest.fixture
def echo_skill():
    return Skill(
        name="custom.echo.report",
        description="Echo a message",
        provider="custom",
        category="testing",
        inputs=[SkillInput(name="message", required=True)],
        risk_level=RiskLevel.LOW,
        execution=ExecutionConfig(type=ExecutionType.CLI, command="echo {message}", timeout=10),
    )


@pytest.fixture
def scale_skill():
    return Skill(
        name="aws.ec2.scale",
        description="Scale an auto scaling group",
        provider="aws",
        category="compute",
        inputs=[
            SkillInput(name="asg_name", required=True),
            SkillInput(name="desired_capacity", type="int", required=True),
        ],
        risk_level=RiskLevel.MEDIUM,
        execution=ExecutionConfig(
            command="aws autoscaling set-desired-capacity --auto-scaling-group-name {asg_name} "
            "--desired-capacity {desired_capacity}",
        ),
        rollback=RollbackConfig(supported=True, procedure="Scale back to the previous capacity"),
    )


@pytest.fixture
def make_gate(business_hours):
    def _make(
        mode: EnforcementLevel = EnforcementLevel.WARN,
        rbac: bool = False,
        users: dict | None = None,
        dry_run: bool = False,
        strict: bool = False,
    ) -> ExecutionGate:
        engine = PolicyEngine(enforcement_mode=mode)
        engine.load_builtins(clock=business_hours)
        authorization = AuthorizationEngine(enabled=rbac)
        for username, role in (users or {}).items():
            authorization.add_user(username, role)
        return ExecutionGate(
            policy_engine=engine,
            safety=SafetyEvaluator(),
            authorization=authorization,
            dry_run=dry_run,
            strict_confirmation=strict,
        )

    return _make


@pytest_asyncio.fixture
async def pipeline(catalog, make_gate, temp_db):
    return Pipeline(
        catalog=catalog,
        gate=make_gate(),
        executor=SkillExecutor(),
        store=temp_db,
    )
