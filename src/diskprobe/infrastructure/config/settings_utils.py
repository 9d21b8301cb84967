"""Environment parsing helpers used by the settings model."""

from __future__ import annotations

import os
from typing import Callable, TypeVar


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

_Number = TypeVar("_Number", int, float)


def parse_bool(value: object, *, default: bool = False) -> bool:
    """Parse a loose boolean value."""
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    raw = str(value).strip().lower()
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    return default


def _raw_env(name: str) -> str | None:
    value = os.environ.get(name)
    if value is None:
        return None
    stripped = str(value).strip()
    # An exported but empty variable means "use the default".
    return stripped or None


def env_str(name: str, default: str = "") -> str:
    value = _raw_env(name)
    return default if value is None else value


def env_bool(name: str, default: bool = False) -> bool:
    return parse_bool(_raw_env(name), default=default)


def _clamp(value: _Number, minimum: _Number | None, maximum: _Number | None) -> _Number:
    if minimum is not None and value < minimum:
        return minimum
    if maximum is not None and value > maximum:
        return maximum
    return value


def _env_number(
    name: str,
    default: _Number,
    cast: Callable[[str], _Number],
    minimum: _Number | None,
    maximum: _Number | None,
) -> _Number:
    value = _raw_env(name)
    if value is None:
        return default
    try:
        parsed = cast(value)
    except ValueError:
        return default
    return _clamp(parsed, minimum, maximum)


def env_int(
    name: str,
    default: int,
    *,
    minimum: int | None = None,
    maximum: int | None = None,
) -> int:
    """Read an integer env var; unparsable values fall back to ``default``."""
    return _env_number(name, default, int, minimum, maximum)


def env_float(
    name: str,
    default: float,
    *,
    minimum: float | None = None,
    maximum: float | None = None,
) -> float:
    """Read a float env var; unparsable values fall back to ``default``."""
    return _env_number(name, default, float, minimum, maximum)
