"""Leveled diagnostic contexts attached to failures."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class MinimalContext:
    """Where the failure happened, nothing else."""

    operation: str
    location: str
    kind: ClassVar[str] = "minimal"


@dataclass(frozen=True)
class StandardContext:
    operation: str
    location: str
    inputs: str
    error_type: str
    kind: ClassVar[str] = "standard"


@dataclass(frozen=True)
class DetailedContext:
    """Standard context plus the decisions taken and how to recover."""

    operation: str
    location: str
    inputs: str
    error_type: str
    decisions: tuple[str, ...]
    progress: str
    recovery_guidance: tuple[str, ...]
    kind: ClassVar[str] = "detailed"


@dataclass(frozen=True)
class ComprehensiveContext:
    """Detailed context plus free-form data and its place in a context chain.

    ``parent_context`` is a back-reference to the context of the calling
    operation; ``context_depth`` is one more than the parent's depth.
    """

    operation: str
    location: str
    inputs: str
    error_type: str
    decisions: tuple[str, ...]
    progress: str
    recovery_guidance: tuple[str, ...]
    additional_data: Mapping[str, object]
    context_depth: int
    parent_context: ErrorContextState | None = None
    kind: ClassVar[str] = "comprehensive"


ErrorContextState = MinimalContext | StandardContext | DetailedContext | ComprehensiveContext


@dataclass(frozen=True)
class LegacyErrorContextData:  # pylint: disable=too-many-instance-attributes
    """Free-form context record produced by older call sites."""

    operation: str
    location: str
    inputs: str | None = None
    decisions: tuple[str, ...] | None = None
    progress: str | None = None
    error_type: str | None = None
    recovery_guidance: tuple[str, ...] | None = None
    additional_data: Mapping[str, object] | None = None
    context_depth: int | None = None
    parent_context: LegacyErrorContextData | None = None


@dataclass(frozen=True)
class PerformanceMetrics:
    """Measurements reported with performance failures; any may be unknown."""

    files_per_second: float | None = None
    memory_peak_mb: float | None = None
    recommended_batch_size: int | None = None
    current_batch_size: int | None = None
    duration_ms: float | None = None


@dataclass(frozen=True)
class NoMetrics:
    kind: ClassVar[str] = "none"


@dataclass(frozen=True)
class BasicMetrics:
    duration_ms: float
    kind: ClassVar[str] = "basic"


@dataclass(frozen=True)
class ThroughputMetrics:
    duration_ms: float
    files_per_second: float
    kind: ClassVar[str] = "throughput"


@dataclass(frozen=True)
class ComprehensiveMetrics:
    """Every measurement is known."""

    duration_ms: float
    files_per_second: float
    memory_peak_mb: float
    current_batch_size: int
    recommended_batch_size: int
    kind: ClassVar[str] = "comprehensive"


PerformanceMetricsState = NoMetrics | BasicMetrics | ThroughputMetrics | ComprehensiveMetrics
