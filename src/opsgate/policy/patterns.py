"""Skill-name patterns shared by policy scoping and RBAC deny lists.

Three forms are understood:

* ``*`` matches every skill;
* ``aws.s3.*`` and ``aws.s3*`` match by prefix (the first form keeps the dot,
  so ``aws.s3.*`` does not match ``aws.s3x.list``);
* anything else must match exactly.
"""

from __future__ import annotations

import enum
from functools import lru_cache
from typing import Iterable, NamedTuple


class PatternKind(str, enum.Enum):
    EXACT = "exact"
    PREFIX = "prefix"
    WILDCARD = "wildcard"


class SkillPattern(NamedTuple):
    kind: PatternKind
    value: str

    @classmethod
    def parse(cls, pattern: str) -> SkillPattern:
        return _parse(pattern)

    def matches(self, skill_name: str) -> bool:
        if self.kind == PatternKind.WILDCARD:
            return True
        if self.kind == PatternKind.PREFIX:
            return skill_name.startswith(self.value)
        return skill_name == self.value


@lru_cache(maxsize=512)
def _parse(pattern: str) -> SkillPattern:
    if pattern == "*":
        return SkillPattern(PatternKind.WILDCARD, "")
    if pattern.endswith("*"):
        return SkillPattern(PatternKind.PREFIX, pattern[:-1])
    return SkillPattern(PatternKind.EXACT, pattern)


def match_skill_pattern(skill_name: str, pattern: str) -> bool:
    return _parse(pattern).matches(skill_name)


def matches_any(skill_name: str, patterns: Iterable[str]) -> bool:
    return any(match_skill_pattern(skill_name, p) for p in patterns)
