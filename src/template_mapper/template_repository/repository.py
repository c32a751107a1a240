"""Template repository: path validation, caching, reading and parsing."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path, PurePath

from template_mapper.core import (
    DomainError,
    Err,
    InvalidResponse,
    MissingRequiredField,
    Ok,
    ReadError,
    Result,
    SecurityViolation,
    WriteError,
    error_message,
    processing_stage_error,
)
from template_mapper.template_entities import Template, TemplateId
from template_mapper.template_paths import TemplatePath
from template_mapper.template_values import TemplateFormat

from .body_parser import extract_mapping_rules, parse_template_body
from .file_system import LocalTemplateFileSystem, TemplateFileSystem
from .template_cache import CacheStats, TemplateCache

_LOGGER = logging.getLogger("template_mapper.repository")
_LOGGER.addHandler(logging.NullHandler())

_CREATION_STAGE = "template creation"
_LOADING_STAGE = "template loading"


@dataclass(frozen=True)
class PreloadFailure:
    path: str
    error: DomainError


@dataclass(frozen=True)
class PreloadReport:
    """Outcome of loading several templates in one call."""

    loaded: tuple[Template, ...]
    failures: tuple[PreloadFailure, ...]


class TemplateRepository:
    """Loads templates from the file system and keeps one instance per path."""

    def __init__(
        self,
        *,
        file_system: TemplateFileSystem | None = None,
        base_directory: Path | str | None = None,
        encoding: str = "utf-8",
        cache_capacity: int | None = None,
    ) -> None:
        self._file_system = file_system or LocalTemplateFileSystem()
        self._base_directory = Path(base_directory) if base_directory is not None else None
        self._encoding = encoding
        self._cache = TemplateCache(capacity=cache_capacity)

    def load(self, path: TemplatePath | str) -> Result[Template, DomainError]:
        """Return the template at ``path``, reading it only on a cache miss."""
        resolved = self._resolve(path)
        if isinstance(resolved, Err):
            return resolved
        template_path, location = resolved.data
        key = str(location)

        cached = self._cache.get(key)
        if cached is not None:
            _LOGGER.debug("Template cache hit: %s", key)
            return Ok(cached)

        with self._cache.key_lock(key):
            cached = self._cache.get(key)
            if cached is not None:
                return Ok(cached)
            try:
                outcome = self._read_and_build(template_path, location)
            except Exception as exc:  # pylint: disable=broad-exception-caught
                outcome = Err(
                    processing_stage_error(
                        _LOADING_STAGE,
                        InvalidResponse(service="template loader", response=str(exc)),
                    )
                )
            if isinstance(outcome, Err):
                _LOGGER.warning("Template load failed: %s", error_message(outcome.error))
                return outcome
            self._cache.put(key, outcome.data)
            _LOGGER.debug("Template cached: %s", key)
            return outcome

    def save(self, path: TemplatePath | str, template: Template) -> Result[None, DomainError]:
        """Write the template body to disk and make it the cached entry for ``path``."""
        resolved = self._resolve(path)
        if isinstance(resolved, Err):
            return resolved
        _, location = resolved.data
        try:
            self._file_system.write_text(
                location, template.get_format().get_template(), self._encoding
            )
        except OSError as exc:
            return Err(WriteError(path=str(location), details=str(exc)))
        self._cache.put(str(location), template)
        return Ok(None)

    def validate(self, template: Template) -> Result[None, DomainError]:
        if not template.get_id() or not template.get_format():
            return Err(MissingRequiredField(fields=("id", "format")))
        return Ok(None)

    def exists(self, path: TemplatePath | str) -> Result[bool, DomainError]:
        resolved = self._resolve(path)
        if isinstance(resolved, Err):
            return resolved
        _, location = resolved.data
        try:
            self._file_system.stat(location)
        except FileNotFoundError:
            return Ok(False)
        except OSError as exc:
            return Err(ReadError(path=str(location), details=str(exc)))
        return Ok(True)

    def get_base_directory(self) -> Result[Path, DomainError]:
        return Ok(self._current_base_directory())

    def get_cached(self, path: TemplatePath | str) -> Template | None:
        resolved = self._resolve(path)
        if isinstance(resolved, Err):
            return None
        return self._cache.get(str(resolved.data[1]))

    def preload(self, paths: Iterable[TemplatePath | str]) -> Result[PreloadReport, DomainError]:
        """Load every path, collecting failures instead of stopping at the first."""
        loaded: list[Template] = []
        failures: list[PreloadFailure] = []
        for path in paths:
            outcome = self.load(path)
            if isinstance(outcome, Ok):
                loaded.append(outcome.data)
            else:
                failures.append(PreloadFailure(path=str(path), error=outcome.error))
        return Ok(PreloadReport(loaded=tuple(loaded), failures=tuple(failures)))

    def clear_cache(self, path: TemplatePath | str | None = None) -> None:
        if path is None:
            self._cache.clear()
            return
        resolved = self._resolve(path)
        if isinstance(resolved, Ok):
            self._cache.discard(str(resolved.data[1]))

    def get_cache_stats(self) -> CacheStats:
        return self._cache.stats()

    def _resolve(self, path: TemplatePath | str) -> Result[tuple[TemplatePath, Path], DomainError]:
        if isinstance(path, TemplatePath):
            template_path = path
        else:
            created = TemplatePath.create(path)
            if isinstance(created, Err):
                return created
            template_path = created.data

        raw = template_path.get_path()
        if raw.startswith("~") or ".." in PurePath(raw).parts:
            return Err(SecurityViolation(path=raw, reason="Path traversal not allowed"))
        return Ok((template_path, self._current_base_directory() / raw))

    def _current_base_directory(self) -> Path:
        return self._base_directory if self._base_directory is not None else Path.cwd()

    def _read_and_build(
        self, template_path: TemplatePath, location: Path
    ) -> Result[Template, DomainError]:
        try:
            content = self._file_system.read_text(location, self._encoding)
        except (OSError, UnicodeDecodeError) as exc:
            return Err(ReadError(path=str(location), details=str(exc)))

        body = parse_template_body(content, template_path.file_format)
        if isinstance(body, Err):
            return body

        template_id = TemplateId.create(template_path.get_path())
        if isinstance(template_id, Err):
            return Err(processing_stage_error(_CREATION_STAGE, template_id.error))

        format_name = body.data.get("format")
        if format_name is None:
            format_name = template_path.file_format.value
        template_format = TemplateFormat.create(format_name, content)
        if isinstance(template_format, Err):
            return Err(processing_stage_error(_CREATION_STAGE, template_format.error))

        mapping_rules = extract_mapping_rules(body.data, content)
        if isinstance(mapping_rules, Err):
            return Err(processing_stage_error(_CREATION_STAGE, mapping_rules.error))

        description = body.data.get("description")
        if description is None:
            description = ""

        template = Template.create(
            template_id.data,
            template_format.data,
            mapping_rules.data,
            description,
        )
        if isinstance(template, Err):
            return Err(processing_stage_error(_CREATION_STAGE, template.error))
        return template
