"""Template path validation exports."""

from .format_detection import (
    SUPPORTED_FORMATS,
    TemplateFileFormat,
    detect_format,
    supported_extensions,
    validate_format,
)
from .template_path import TemplatePath

__all__ = [
    "SUPPORTED_FORMATS",
    "TemplateFileFormat",
    "TemplatePath",
    "detect_format",
    "supported_extensions",
    "validate_format",
]
