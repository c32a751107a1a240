"""Table-driven classification of template paths by file extension."""

from __future__ import annotations

from enum import Enum

from template_mapper.core import Err, FileExtensionMismatch, Ok, Result


class TemplateFileFormat(str, Enum):
    """File formats a template body may be written in."""

    JSON = "json"
    YAML = "yaml"
    TOML = "toml"

    @property
    def extensions(self) -> tuple[str, ...]:
        """Return every extension registered for this format."""
        return tuple(extension for kind, extension in SUPPORTED_FORMATS if kind is self)


SUPPORTED_FORMATS: tuple[tuple[TemplateFileFormat, str], ...] = (
    (TemplateFileFormat.JSON, ".json"),
    (TemplateFileFormat.YAML, ".yaml"),
    (TemplateFileFormat.YAML, ".yml"),
    (TemplateFileFormat.TOML, ".toml"),
)


def supported_extensions() -> tuple[str, ...]:
    return tuple(extension for _, extension in SUPPORTED_FORMATS)


def detect_format(path: str) -> TemplateFileFormat | None:
    """Return the first format whose extension ends the path, if any."""
    for kind, extension in SUPPORTED_FORMATS:
        if path.endswith(extension):
            return kind
    return None


def validate_format(path: str) -> Result[TemplateFileFormat, FileExtensionMismatch]:
    """Classify the path or report every extension that would have been accepted."""
    detected = detect_format(path)
    if detected is None:
        return Err(FileExtensionMismatch(path=path, expected=supported_extensions()))
    return Ok(detected)
