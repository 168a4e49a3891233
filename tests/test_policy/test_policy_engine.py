"""Brutal tests for the policy engine."""

from __future__ import annotations

import logging
import threading

import pytest

from opsgate.exceptions import InvalidInputError, NotFoundError
from opsgate.models.policy import EnforcementLevel, Policy, Severity
from opsgate.models.risk import RiskLevel
from opsgate.models.skill import Skill
from opsgate.policy.engine import PolicyEngine


def _policy(name="always", applies_to=(), environments=(), check=None, enforcement=EnforcementLevel.DENY):
    return Policy(
        name=name,
        description=f"{name} policy",
        enforcement=enforcement,
        severity=Severity.CRITICAL,
        applies_to=applies_to,
        environments=environments,
        check=check or (lambda skill, params, env: (True, f"{name} triggered")),
    )


def _engine(mode=EnforcementLevel.WARN):
    return PolicyEngine(enforcement_mode=mode)


SKILL = Skill(name="aws.s3.sync", risk_level=RiskLevel.HIGH)


class TestRegistration:
    def test_register_and_list(self):
        engine = _engine()
        engine.register(_policy("a"))
        engine.register(_policy("b"))
        assert [p.name for p in engine.list_policies()] == ["a", "b"]

    def test_duplicate_rejected(self):
        engine = _engine()
        engine.register(_policy("a"))
        with pytest.raises(InvalidInputError):
            engine.register(_policy("a"))

    def test_get_policy(self):
        engine = _engine()
        engine.register(_policy("a"))
        assert engine.get_policy("a").name == "a"
        with pytest.raises(NotFoundError):
            engine.get_policy("missing")

    def test_load_all_builtins(self):
        engine = _engine()
        engine.load_builtins()
        assert len(engine.list_policies()) == 8

    def test_load_selected_builtins(self):
        engine = _engine()
        engine.load_builtins(enabled=["no_public_s3", "enforce_encryption"])
        assert [p.name for p in engine.list_policies()] == ["no_public_s3", "enforce_encryption"]

    def test_load_unknown_builtin(self):
        with pytest.raises(NotFoundError, match="bogus"):
            _engine().load_builtins(enabled=["bogus"])

    def test_mode_accepts_string(self):
        assert _engine("deny").enforcement_mode == EnforcementLevel.DENY


class TestEvaluate:
    def test_no_policies_passes(self):
        result = _engine().evaluate(SKILL, {}, "staging")
        assert result.passed is True
        assert result.denied is False
        assert result.violations == [] and result.warnings == []

    def test_warn_mode_never_denies(self):
        engine = _engine(EnforcementLevel.WARN)
        engine.register(_policy("a", enforcement=EnforcementLevel.DENY))
        result = engine.evaluate(SKILL, {}, "staging")
        assert result.passed is True
        assert result.denied is False
        assert [w.policy_name for w in result.warnings] == ["a"]

    def test_deny_mode_denies_warn_rules(self):
        engine = _engine(EnforcementLevel.DENY)
        engine.register(_policy("a", enforcement=EnforcementLevel.WARN))
        result = engine.evaluate(SKILL, {}, "staging")
        assert result.passed is False
        assert result.denied is True
        assert result.policy_names() == ["a"]
        assert result.violations[0].enforcement == EnforcementLevel.WARN

    def test_violation_fields(self):
        engine = _engine(EnforcementLevel.DENY)
        engine.register(_policy("a"))
        v = engine.evaluate(SKILL, {}, "qa").violations[0]
        assert v.skill_name == "aws.s3.sync"
        assert v.environment == "qa"
        assert v.reason == "a triggered"
        assert v.description == "a policy"

    def test_applies_to_filters(self):
        engine = _engine(EnforcementLevel.DENY)
        engine.register(_policy("ec2", applies_to=("aws.ec2.*",)))
        assert engine.evaluate(SKILL, {}, "staging").passed is True

    def test_environment_filter_case_insensitive(self):
        engine = _engine(EnforcementLevel.DENY)
        engine.register(_policy("prod", environments=("production",)))
        assert engine.evaluate(SKILL, {}, "staging").passed is True
        assert engine.evaluate(SKILL, {}, "PRODUCTION").denied is True

    def test_passing_check_not_recorded(self):
        engine = _engine(EnforcementLevel.DENY)
        engine.register(_policy("ok", check=lambda s, p, e: (False, "")))
        result = engine.evaluate(SKILL, {}, "staging")
        assert result.passed is True
        assert result.violations == []

    def test_registration_order_kept(self):
        engine = _engine(EnforcementLevel.DENY)
        for name in ("z", "a", "m"):
            engine.register(_policy(name))
        assert engine.evaluate(SKILL, {}, "staging").policy_names() == ["z", "a", "m"]

    def test_faulty_rule_is_logged_and_skipped(self, caplog):
        def boom(skill, params, env):
            raise RuntimeError("bad rule")

        engine = _engine(EnforcementLevel.DENY)
        engine.register(_policy("broken", check=boom))
        engine.register(_policy("ok", check=lambda s, p, e: (False, "")))
        with caplog.at_level(logging.ERROR, logger="opsgate.policy.engine"):
            result = engine.evaluate(SKILL, {}, "staging")
        assert result.passed is True
        assert "broken" in caplog.text

    def test_none_params(self):
        engine = _engine()
        engine.load_builtins()
        result = engine.evaluate(SKILL, None, "staging")
        assert result.passed is True


class TestBuiltinsThroughEngine:
    def test_public_acl_denied(self):
        engine = _engine(EnforcementLevel.DENY)
        engine.load_builtins()
        result = engine.evaluate(SKILL, {"acl": "public-read"}, "staging")
        assert result.denied is True
        assert "no_public_s3" in result.policy_names()

    def test_tags_warning_on_ec2(self):
        engine = _engine(EnforcementLevel.WARN)
        engine.load_builtins()
        skill = Skill(name="aws.ec2.scale", risk_level=RiskLevel.MEDIUM)
        result = engine.evaluate(skill, {"asg_name": "web"}, "staging")
        assert result.passed is True
        assert "require_tags" in [w.policy_name for w in result.warnings]


class TestConcurrency:
    def test_concurrent_register_and_evaluate(self):
        engine = _engine(EnforcementLevel.DENY)
        errors = []

        def writer(i):
            try:
                engine.register(_policy(f"p{i}"))
            except Exception as exc:
                errors.append(exc)

        def reader():
            try:
                engine.evaluate(SKILL, {}, "staging")
            except Exception as exc:
                errors.append(exc)

        threads = [threading.Thread(target=writer, args=(i,)) for i in range(20)]
        threads += [threading.Thread(target=reader) for _ in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(engine.list_policies()) == 20
