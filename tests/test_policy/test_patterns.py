"""Brutal tests for skill-name pattern matching."""

from __future__ import annotations

import pytest

from opsgate.policy.patterns import PatternKind, SkillPattern, match_skill_pattern, matches_any


class TestParse:
    def test_wildcard(self):
        assert SkillPattern.parse("*") == SkillPattern(PatternKind.WILDCARD, "")

    def test_dotted_prefix(self):
        assert SkillPattern.parse("aws.s3.*") == SkillPattern(PatternKind.PREFIX, "aws.s3.")

    def test_bare_prefix(self):
        assert SkillPattern.parse("aws.s3*") == SkillPattern(PatternKind.PREFIX, "aws.s3")

    def test_exact(self):
        assert SkillPattern.parse("k8s.deploy") == SkillPattern(PatternKind.EXACT, "k8s.deploy")


class TestMatch:
    @pytest.mark.parametrize(
        "name,pattern,expected",
        [
            ("anything.at.all", "*", True),
            ("aws.s3.sync", "aws.s3.*", True),
            ("aws.s3x.list", "aws.s3.*", False),
            ("aws.s3x.list", "aws.s3*", True),
            ("k8s.deploy", "k8s.deploy", True),
            ("k8s.deployment", "k8s.deploy", False),
            ("k8s.deploy", "terraform.*", False),
        ],
    )
    def test_match_skill_pattern(self, name, pattern, expected):
        assert match_skill_pattern(name, pattern) is expected

    def test_matches_any(self):
        assert matches_any("aws.sg.audit", ["aws.ec2.*", "aws.sg.*"]) is True
        assert matches_any("gcp.gce.snapshot", ["aws.ec2.*", "aws.sg.*"]) is False

    def test_matches_any_empty(self):
        assert matches_any("aws.ec2.list", []) is False
