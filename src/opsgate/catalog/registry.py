"""Skill catalog — read-mostly registry of skill metadata."""

from __future__ import annotations

import threading
from typing import Any, Iterable, Mapping, Optional

from opsgate.catalog.builtin_skills import builtin_skills
from opsgate.exceptions import InvalidInputError, NotFoundError
from opsgate.models.skill import Skill


class SkillCatalog:
    def __init__(self, skills: Iterable[Skill] = ()) -> None:
        self._skills: dict[str, Skill] = {}
        self._lock = threading.Lock()
        for skill in skills:
            self.register(skill)

    def register(self, skill: Skill) -> None:
        with self._lock:
            if skill.name in self._skills:
                raise InvalidInputError(f"Skill already registered: {skill.name}", field="name")
            self._skills[skill.name] = skill

    def load_builtins(self) -> None:
        for skill in builtin_skills():
            self.register(skill)

    def get(self, name: str) -> Skill:
        with self._lock:
            skill = self._skills.get(name)
        if skill is None:
            raise NotFoundError(f"Skill not found: {name}")
        return skill

    def list(self, provider: Optional[str] = None) -> list[Skill]:
        with self._lock:
            skills = list(self._skills.values())
        if provider:
            skills = [s for s in skills if s.provider == provider.lower()]
        return sorted(skills, key=lambda s: s.name)

    def search(self, query: str) -> list[Skill]:
        query = query.lower()
        return [
            s for s in self.list()
            if query in s.name.lower()
            or query in s.provider.lower()
            or query in s.category.lower()
            or query in s.description.lower()
        ]

    def __len__(self) -> int:
        with self._lock:
            return len(self._skills)


def validate_params(skill: Skill, params: Optional[Mapping[str, Any]]) -> None:
    """Raise InvalidInputError naming the first missing required input."""
    params = params or {}
    for name in skill.required_inputs():
        value = params.get(name)
        if value is None or value == "":
            raise InvalidInputError(
                f"Missing required parameter '{name}' for {skill.name}", field=name
            )


def apply_defaults(skill: Skill, params: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    """Return a copy of ``params`` with declared input defaults filled in."""
    merged = dict(params or {})
    for item in skill.inputs:
        if item.default and item.name not in merged:
            merged[item.name] = item.default
    return merged
