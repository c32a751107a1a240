"""Template aggregate and its identity."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from template_mapper.core import DomainError, EmptyInput, Err, InvalidFormat, Ok, Result
from template_mapper.template_values import MappingRule, TemplateFormat


@dataclass(frozen=True)
class TemplateId:
    """Identity of a template, derived from the path it was loaded from."""

    value: str

    @staticmethod
    def create(value: str) -> Result[TemplateId, DomainError]:
        if not isinstance(value, str) or not value.strip():
            return Err(EmptyInput(field="template_id"))
        return Ok(TemplateId(value=value))

    def get_value(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, eq=False)
class Template:
    """Loaded template: format, ordered mapping rules and a description.

    Equality is identity; the repository cache hands out the same instance for
    every load of one path.
    """

    id: TemplateId
    format: TemplateFormat
    mapping_rules: tuple[MappingRule, ...]
    description: str = ""

    @staticmethod
    def create(
        template_id: TemplateId,
        template_format: TemplateFormat,
        mapping_rules: Sequence[MappingRule],
        description: str = "",
    ) -> Result[Template, DomainError]:
        if not isinstance(description, str):
            return Err(InvalidFormat(input=repr(description), expected_format="description string"))
        return Ok(
            Template(
                id=template_id,
                format=template_format,
                mapping_rules=tuple(mapping_rules),
                description=description,
            )
        )

    def get_id(self) -> TemplateId:
        return self.id

    def get_format(self) -> TemplateFormat:
        return self.format

    def get_mapping_rules(self) -> tuple[MappingRule, ...]:
        return self.mapping_rules

    def get_description(self) -> str:
        return self.description

    def apply_rules(self, data: Mapping[str, object]) -> dict[str, object]:
        """Build a nested dict holding each resolved source at its target path."""
        output: dict[str, object] = {}
        for rule in self.mapping_rules:
            found, value = rule.lookup(data)
            if not found:
                continue
            _set_by_path(output, rule.target, value)
        return output


def _set_by_path(output: dict[str, object], path: str, value: object) -> None:
    *parents, last = path.split(".")
    current = output
    for part in parents:
        child = current.get(part)
        if not isinstance(child, dict):
            child = {}
            current[part] = child
        current = child
    current[last] = value
