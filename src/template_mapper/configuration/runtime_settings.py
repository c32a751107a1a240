"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from template_mapper.template_values import DEFAULT_MAX_CONCURRENCY, DEFAULT_MAX_CONCURRENCY_LIMIT


@dataclass(frozen=True)
class RepositorySettings:
    """Where templates are read from and how they are cached."""

    base_directory: Path | None = None
    encoding: str = "utf-8"
    cache_capacity: int | None = None


@dataclass(frozen=True)
class ProcessingSettings:
    """Limits and defaults for processing options."""

    max_concurrency_limit: int = DEFAULT_MAX_CONCURRENCY_LIMIT
    parallel: bool = True
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    continue_on_error: bool = False


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    path: Path | None = None
    repository: RepositorySettings = field(default_factory=RepositorySettings)
    processing: ProcessingSettings = field(default_factory=ProcessingSettings)
