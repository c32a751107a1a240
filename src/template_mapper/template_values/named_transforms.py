"""Transforms that template files can reference by name."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from template_mapper.core import DomainError, Err, InvalidFormat, Ok, Result

from .value_objects import Transform


def _to_str(value: object) -> object:
    if value is None:
        return None
    return str(value)


def _to_int(value: object) -> object:
    if isinstance(value, bool) or value is None:
        return None
    try:
        return int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        return None


def _to_float(value: object) -> object:
    if isinstance(value, bool) or value is None:
        return None
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


_TRUE_WORDS = frozenset({"true", "yes", "on", "1"})
_FALSE_WORDS = frozenset({"false", "no", "off", "0"})


def _to_bool(value: object) -> object:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    return None


def _lower(value: object) -> object:
    return value.lower() if isinstance(value, str) else value


def _upper(value: object) -> object:
    return value.upper() if isinstance(value, str) else value


def _strip(value: object) -> object:
    return value.strip() if isinstance(value, str) else value


NAMED_TRANSFORMS: Mapping[str, Transform] = MappingProxyType(
    {
        "str": _to_str,
        "int": _to_int,
        "float": _to_float,
        "bool": _to_bool,
        "lower": _lower,
        "upper": _upper,
        "strip": _strip,
    }
)


def resolve_transform(name: object) -> Result[Transform | None, DomainError]:
    """Look up a transform by name; ``None`` means no transform."""
    if name is None:
        return Ok(None)
    if isinstance(name, str) and name in NAMED_TRANSFORMS:
        return Ok(NAMED_TRANSFORMS[name])
    expected = ", ".join(sorted(NAMED_TRANSFORMS))
    return Err(InvalidFormat(input=repr(name), expected_format=f"transform name ({expected})"))
