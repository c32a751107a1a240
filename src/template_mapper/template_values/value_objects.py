"""Template value objects built through validating factories."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from template_mapper.core import DomainError, EmptyInput, Err, InvalidFormat, Ok, OutOfRange, Result

DEFAULT_MAX_CONCURRENCY = 5
DEFAULT_MAX_CONCURRENCY_LIMIT = 100

Transform = Callable[[object], object]


class TemplateFormatKind(str, Enum):
    """Content formats a template body can declare."""

    JSON = "json"
    YAML = "yaml"
    TOML = "toml"
    HANDLEBARS = "handlebars"
    CUSTOM = "custom"


@dataclass(frozen=True)
class TemplateFormat:
    """Declared format kind together with the raw template body."""

    kind: TemplateFormatKind
    template: str

    @staticmethod
    def create(format_name: str, template: str) -> Result[TemplateFormat, DomainError]:
        if not isinstance(template, str) or not template.strip():
            return Err(EmptyInput(field="template"))
        try:
            kind = TemplateFormatKind(format_name)
        except (TypeError, ValueError):
            expected = ", ".join(member.value for member in TemplateFormatKind)
            return Err(InvalidFormat(input=str(format_name), expected_format=f"one of {expected}"))
        return Ok(TemplateFormat(kind=kind, template=template))

    def get_format(self) -> str:
        return self.kind.value

    def get_template(self) -> str:
        return self.template


@dataclass(frozen=True)
class MappingRule:
    """Copies the value found at ``source`` to ``target``, optionally transformed.

    Both paths use dot notation. Resolution only descends through mappings:
    a list, a scalar or ``None`` met before the last segment ends the lookup
    without a value, and so does a missing key. No fallback value is ever
    produced for an unresolved source.
    """

    source: str
    target: str
    transform: Transform | None = field(default=None, compare=False)

    @staticmethod
    def create(
        source: str, target: str, transform: Transform | None = None
    ) -> Result[MappingRule, DomainError]:
        for name, value in (("source", source), ("target", target)):
            if value is None or value == "":
                return Err(EmptyInput(field=name))
            if not isinstance(value, str):
                return Err(InvalidFormat(input=repr(value), expected_format=f"{name} path string"))
        return Ok(MappingRule(source=source, target=target, transform=transform))

    def get_source(self) -> str:
        return self.source

    def get_target(self) -> str:
        return self.target

    def lookup(self, data: Mapping[str, object]) -> tuple[bool, object]:
        """Return whether the source resolved and the (transformed) value."""
        current: object = data
        for segment in self.source.split("."):
            if not isinstance(current, Mapping) or segment not in current:
                return False, None
            current = current[segment]
        if self.transform is not None:
            return True, self.transform(current)
        return True, current

    def apply(self, data: Mapping[str, object]) -> object | None:
        _, value = self.lookup(data)
        return value


@dataclass(frozen=True)
class ProcessingOptions:
    """Batch processing knobs handed to the document pipeline."""

    parallel: bool = True
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    continue_on_error: bool = False

    @staticmethod
    def create(
        options: Mapping[str, object] | None = None,
        *,
        max_limit: int = DEFAULT_MAX_CONCURRENCY_LIMIT,
    ) -> Result[ProcessingOptions, DomainError]:
        values = options or {}
        parallel = values.get("parallel")
        max_concurrency = values.get("max_concurrency")
        continue_on_error = values.get("continue_on_error")

        parallel = True if parallel is None else parallel
        max_concurrency = DEFAULT_MAX_CONCURRENCY if max_concurrency is None else max_concurrency
        continue_on_error = False if continue_on_error is None else continue_on_error

        if not isinstance(parallel, bool):
            return Err(InvalidFormat(input=repr(parallel), expected_format="boolean parallel"))
        if not isinstance(continue_on_error, bool):
            return Err(
                InvalidFormat(
                    input=repr(continue_on_error), expected_format="boolean continue_on_error"
                )
            )
        if isinstance(max_concurrency, bool) or not isinstance(max_concurrency, int):
            return Err(
                InvalidFormat(
                    input=repr(max_concurrency), expected_format="integer max_concurrency"
                )
            )
        if max_concurrency < 1 or max_concurrency > max_limit:
            return Err(OutOfRange(value=max_concurrency, min=1, max=max_limit))
        return Ok(
            ProcessingOptions(
                parallel=parallel,
                max_concurrency=max_concurrency,
                continue_on_error=continue_on_error,
            )
        )

    def is_parallel(self) -> bool:
        return self.parallel

    def get_max_concurrency(self) -> int:
        return self.max_concurrency

    def should_continue_on_error(self) -> bool:
        return self.continue_on_error
