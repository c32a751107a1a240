"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from template_mapper.core import Ok, error_message
from template_mapper.template_values import ProcessingOptions

from .runtime_settings import Configuration, ProcessingSettings, RepositorySettings


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str) -> Configuration:
    """Load and validate the configuration file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    repository = _parse_repository_section(parsed.get("repository"), path.parent)
    processing = _parse_processing_section(parsed.get("processing"))
    return Configuration(path=path, repository=repository, processing=processing)


def build_processing_options(settings: ProcessingSettings) -> ProcessingOptions:
    """Turn configured defaults into validated processing options."""
    options = ProcessingOptions.create(
        {
            "parallel": settings.parallel,
            "max_concurrency": settings.max_concurrency,
            "continue_on_error": settings.continue_on_error,
        },
        max_limit=settings.max_concurrency_limit,
    )
    if not isinstance(options, Ok):
        raise ConfigurationError(f"processing: {error_message(options.error)}")
    return options.data


def _parse_repository_section(value: Any, base_path: Path) -> RepositorySettings:
    section = _optional_mapping(value, "repository")
    base_directory_raw = _optional_string(
        section.get("base_directory"), "repository.base_directory"
    )
    base_directory = (
        _resolve_path(base_path, base_directory_raw) if base_directory_raw is not None else None
    )
    encoding = _optional_string(section.get("encoding"), "repository.encoding") or "utf-8"
    cache_capacity_raw = section.get("cache_capacity")
    cache_capacity = (
        None
        if cache_capacity_raw is None
        else _require_positive_int(cache_capacity_raw, "repository.cache_capacity")
    )
    return RepositorySettings(
        base_directory=base_directory,
        encoding=encoding,
        cache_capacity=cache_capacity,
    )


def _parse_processing_section(value: Any) -> ProcessingSettings:
    section = _optional_mapping(value, "processing")
    defaults = ProcessingSettings()
    settings = ProcessingSettings(
        max_concurrency_limit=_require_positive_int(
            section.get("max_concurrency_limit", defaults.max_concurrency_limit),
            "processing.max_concurrency_limit",
        ),
        parallel=_require_bool(section.get("parallel", defaults.parallel), "processing.parallel"),
        max_concurrency=_require_positive_int(
            section.get("max_concurrency", defaults.max_concurrency),
            "processing.max_concurrency",
        ),
        continue_on_error=_require_bool(
            section.get("continue_on_error", defaults.continue_on_error),
            "processing.continue_on_error",
        ),
    )
    build_processing_options(settings)
    return settings


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _optional_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping.")
    return value


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None


def _require_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be a boolean.")
    return value


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value
