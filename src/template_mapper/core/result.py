"""Result type shared by every fallible domain operation."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import ClassVar, Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")
F = TypeVar("F")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying the produced value."""

    data: T
    ok: ClassVar[bool] = True


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed outcome carrying the domain error."""

    error: E
    ok: ClassVar[bool] = False


Result = Ok[T] | Err[E]


def map_result(result: Result[T, E], mapper: Callable[[T], U]) -> Result[U, E]:
    """Transform the value of a successful result."""
    if isinstance(result, Ok):
        return Ok(mapper(result.data))
    return result


def flat_map_result(result: Result[T, E], mapper: Callable[[T], Result[U, E]]) -> Result[U, E]:
    """Chain another result-returning step onto a successful result."""
    if isinstance(result, Ok):
        return mapper(result.data)
    return result


def map_error(result: Result[T, E], mapper: Callable[[E], F]) -> Result[T, F]:
    """Transform the error of a failed result."""
    if isinstance(result, Err):
        return Err(mapper(result.error))
    return result


def combine_results(results: Iterable[Result[T, E]]) -> Result[list[T], E]:
    """Collect values in order, stopping at the first failure."""
    values: list[T] = []
    for result in results:
        if isinstance(result, Err):
            return result
        values.append(result.data)
    return Ok(values)


def unwrap_or(result: Result[T, E], default: T) -> T:
    """Return the value of a successful result or the given default."""
    if isinstance(result, Ok):
        return result.data
    return default
