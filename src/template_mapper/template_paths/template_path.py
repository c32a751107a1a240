"""Validated template path value."""

from __future__ import annotations

from dataclasses import dataclass

from template_mapper.core import DomainError, EmptyInput, Err, InvalidFormat, Ok, Result

from .format_detection import TemplateFileFormat, validate_format


@dataclass(frozen=True)
class TemplatePath:
    """Non-empty path string ending with a supported template extension.

    Instances are only obtained through ``TemplatePath.create``.
    """

    value: str
    file_format: TemplateFileFormat

    @staticmethod
    def create(path: object) -> Result[TemplatePath, DomainError]:
        if not isinstance(path, str):
            return Err(InvalidFormat(input=repr(path), expected_format="template path string"))
        if not path.strip():
            return Err(EmptyInput(field="template_path"))
        classification = validate_format(path)
        if isinstance(classification, Err):
            return classification
        return Ok(TemplatePath(value=path, file_format=classification.data))

    def get_path(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value
