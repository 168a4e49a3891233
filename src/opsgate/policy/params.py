"""Helpers for reading duck-typed execution parameters."""

from __future__ import annotations

from typing import Any, Mapping, Optional


def int_param(params: Optional[Mapping[str, Any]], key: str) -> Optional[int]:
    """Return ``params[key]`` as an int, or None when absent or not integral.

    Decimal strings are accepted since the CLI passes every value as text.
    """
    if not params or key not in params:
        return None
    value = params[key]
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def flag_param(params: Optional[Mapping[str, Any]], key: str) -> bool:
    """True only for an explicit boolean ``True`` (or the string ``"true"``)."""
    if not params:
        return False
    value = params.get(key)
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False


def format_param(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(format_param(v) for v in value)
    return str(value)
