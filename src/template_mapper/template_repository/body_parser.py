"""Parsing of template file bodies into structured data and mapping rules."""

from __future__ import annotations

import json
import re
import tomllib
from collections.abc import Callable, Mapping
from typing import Any

import yaml

from template_mapper.core import DomainError, Err, InvalidFormat, Ok, Result
from template_mapper.template_paths import TemplateFileFormat
from template_mapper.template_values import MappingRule, resolve_transform

_PARSERS: Mapping[TemplateFileFormat, tuple[Callable[[str], Any], tuple[type[Exception], ...]]] = {
    TemplateFileFormat.JSON: (json.loads, (json.JSONDecodeError,)),
    TemplateFileFormat.YAML: (yaml.safe_load, (yaml.YAMLError,)),
    TemplateFileFormat.TOML: (tomllib.loads, (tomllib.TOMLDecodeError,)),
}

_REF_ENTRY = re.compile(r'"\$ref"\s*:\s*"[^"]*"')
_PLACEHOLDER = re.compile(r"\{([A-Za-z_][\w.]*)\}|\{\{([A-Za-z_][\w.]*)\}\}", re.ASCII)


def expected_shape(file_format: TemplateFileFormat) -> str:
    return (
        f"{file_format.value.upper()} object with optional "
        "'format', 'description' and 'mappings' fields"
    )


def parse_template_body(
    content: str, file_format: TemplateFileFormat
) -> Result[Mapping[str, Any], DomainError]:
    """Parse the raw file content; the root must be a mapping."""
    parser, parse_errors = _PARSERS[file_format]
    try:
        parsed = parser(content)
    except parse_errors:
        return Err(InvalidFormat(input=content, expected_format=expected_shape(file_format)))
    if not isinstance(parsed, Mapping):
        return Err(InvalidFormat(input=content, expected_format=expected_shape(file_format)))
    return Ok(parsed)


def extract_placeholders(content: str) -> tuple[str, ...]:
    """Return the field names of ``{field}`` and ``{{field}}`` placeholders in order.

    ``"$ref": "..."`` entries are ignored; each name is listed once.
    """
    cleaned = _REF_ENTRY.sub("", content)
    names: dict[str, None] = {}
    for match in _PLACEHOLDER.finditer(cleaned):
        names.setdefault(match.group(1) or match.group(2), None)
    return tuple(names)


def extract_mapping_rules(
    body: Mapping[str, Any], content: str = ""
) -> Result[tuple[MappingRule, ...], DomainError]:
    """Build rules from the ``mappings`` list, then one identity rule per placeholder.

    A placeholder already covered by an explicit rule with the same source and
    target adds nothing.
    """
    entries = body.get("mappings")
    if entries is None:
        entries = []
    if not isinstance(entries, list):
        return Err(InvalidFormat(input=repr(entries), expected_format="list of mapping entries"))

    rules: list[MappingRule] = []
    for entry in entries:
        if not isinstance(entry, Mapping):
            return Err(
                InvalidFormat(
                    input=repr(entry), expected_format="mapping entry with source and target"
                )
            )
        transform = resolve_transform(entry.get("transform"))
        if isinstance(transform, Err):
            return transform
        rule = MappingRule.create(entry.get("source"), entry.get("target"), transform.data)
        if isinstance(rule, Err):
            return rule
        rules.append(rule.data)

    for name in extract_placeholders(content):
        if any(rule.source == name and rule.target == name for rule in rules):
            continue
        rules.append(MappingRule(source=name, target=name))
    return Ok(tuple(rules))
