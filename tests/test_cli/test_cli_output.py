"""Brutal tests for Rich display helpers."""

from __future__ import annotations

from io import StringIO

from rich.console import Console

from opsgate.cli.output import (
    print_config,
    print_decision,
    print_error,
    print_history,
    print_info,
    print_policies,
    print_policy_result,
    print_result,
    print_safety_report,
    print_skill_info,
    print_skills,
    print_users,
)
from opsgate.models.decision import ExecutionDecision, ExecutionResult, ExecutionStatus, GateState
from opsgate.models.policy import EnforcementLevel, EvaluationResult, Severity, Violation
from opsgate.models.rbac import Role, User
from opsgate.models.risk import RiskLevel
from opsgate.models.safety import SafetyReport
from opsgate.policy.builtin_policies import builtin_policies


def _capture(func, *args, **kwargs) -> str:
    """Capture Rich output by temporarily replacing the module console."""
    import opsgate.cli.output as mod
    buf = StringIO()
    original = mod.console
    mod.console = Console(file=buf, force_terminal=True, width=160)
    try:
        func(*args, **kwargs)
    finally:
        mod.console = original
    return buf.getvalue()


def _violation(name="no_public_s3", reason="public ACL"):
    return Violation(
        policy_name=name,
        severity=Severity.CRITICAL,
        enforcement=EnforcementLevel.DENY,
        reason=reason,
        skill_name="aws.s3.sync",
        environment="staging",
    )


def _report(**kwargs):
    defaults = dict(skill_name="k8s.deploy", risk_level=RiskLevel.HIGH, blast_radius=1)
    defaults.update(kwargs)
    return SafetyReport(**defaults)


class TestPrintPolicyResult:
    def test_all_passed(self):
        assert "All policies passed" in _capture(print_policy_result, EvaluationResult())

    def test_deny_and_warn_rows(self):
        result = EvaluationResult(
            passed=False,
            denied=True,
            violations=[_violation()],
            warnings=[_violation("require_tags", "Missing required tags")],
        )
        output = _capture(print_policy_result, result)
        assert "no_public_s3" in output
        assert "DENY" in output
        assert "require_tags" in output
        assert "WARN" in output


class TestPrintSafetyReport:
    def test_fields(self):
        output = _capture(
            print_safety_report,
            _report(affected_resources=["k8s/deployment resources"], requires_confirmation=True,
                    confirmation_prompt='Type "yes, apply" to proceed'),
        )
        assert "HIGH" in output
        assert "k8s/deployment resources" in output
        assert "yes, apply" in output
        assert "not available" in output

    def test_environment_warning(self):
        output = _capture(print_safety_report, _report(environment_warning="PRODUCTION!"))
        assert "PRODUCTION!" in output


class TestPrintDecision:
    def test_states(self):
        for state, label in [
            (GateState.DENIED, "DENIED"),
            (GateState.AWAITING_CONFIRMATION, "AWAITING CONFIRMATION"),
            (GateState.DRY_RUN, "DRY RUN"),
            (GateState.ADMITTED, "ADMITTED"),
        ]:
            decision = ExecutionDecision(skill_name="k8s.deploy", environment="staging", state=state)
            assert label in _capture(print_decision, decision)

    def test_reason_and_command(self):
        decision = ExecutionDecision(
            skill_name="k8s.deploy",
            environment="staging",
            state=GateState.DRY_RUN,
            report=_report(),
            reason="Global dry-run mode is enabled",
            interpolated_command="kubectl set image deployment/web",
        )
        output = _capture(print_decision, decision)
        assert "Global dry-run mode is enabled" in output
        assert "kubectl set image deployment/web" in output
        assert "k8s.deploy @ staging" in output
        assert "Safety Report" in output


class TestPrintResult:
    def test_success(self):
        result = ExecutionResult(
            skill_name="x", status=ExecutionStatus.SUCCESS, command="echo hi", stdout="hi", exit_code=0
        )
        output = _capture(print_result, result)
        assert "OK" in output
        assert "echo hi" in output

    def test_failure_shows_message(self):
        result = ExecutionResult(
            skill_name="x", status=ExecutionStatus.FAILED, command="false",
            stderr="boom", exit_code=1, message="Command failed (exit 1): boom",
        )
        output = _capture(print_result, result)
        assert "FAIL" in output
        assert "Command failed" in output


class TestCatalogDisplays:
    def test_print_skills(self, catalog):
        output = _capture(print_skills, catalog.list(provider="k8s"))
        assert "k8s.deploy" in output
        assert "HIGH" in output

    def test_print_skill_info(self, catalog):
        output = _capture(print_skill_info, catalog.get("terraform.apply"))
        assert "CRITICAL" in output
        assert "working_dir" in output
        assert "terraform -chdir={working_dir} apply -auto-approve" in output
        assert "Rollback" in output

    def test_print_policies(self):
        output = _capture(print_policies, builtin_policies(), EnforcementLevel.DENY)
        assert "mode: deny" in output
        assert "max_blast_radius" in output


class TestPrintUsers:
    def test_users(self):
        output = _capture(print_users, [User(username="ada", role=Role.ADMIN, teams=["sre"])], True)
        assert "enabled" in output
        assert "ada" in output
        assert "admin" in output

    def test_no_users(self):
        output = _capture(print_users, [], False)
        assert "disabled" in output
        assert "No users configured" in output


class TestMisc:
    def test_print_error(self):
        output = _capture(print_error, "Something broke")
        assert "Something broke" in output
        assert "Error" in output

    def test_print_info(self):
        assert "hello" in _capture(print_info, "hello")

    def test_print_history(self):
        rows = [
            {
                "created_at": "2024-06-12T11:00:00",
                "skill_name": "k8s.deploy",
                "environment": "staging",
                "username": "",
                "risk_level": 2,
                "state": "admitted",
                "execution_status": None,
            },
            {
                "created_at": "2024-06-12T12:00:00",
                "skill_name": "terraform.apply",
                "environment": "production",
                "username": "ada",
                "risk_level": None,
                "state": "denied",
                "execution_status": None,
            },
        ]
        output = _capture(print_history, rows)
        assert "k8s.deploy" in output
        assert "HIGH" in output
        assert "denied" in output

    def test_print_config(self):
        output = _capture(print_config, {"Dry Run": False, "Log Level": "INFO"})
        assert "Dry Run" in output
        assert "False" in output
