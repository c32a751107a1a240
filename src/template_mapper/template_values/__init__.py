"""Template value object exports."""

from .named_transforms import NAMED_TRANSFORMS, resolve_transform
from .value_objects import (
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_MAX_CONCURRENCY_LIMIT,
    MappingRule,
    ProcessingOptions,
    TemplateFormat,
    TemplateFormatKind,
    Transform,
)

__all__ = [
    "DEFAULT_MAX_CONCURRENCY",
    "DEFAULT_MAX_CONCURRENCY_LIMIT",
    "NAMED_TRANSFORMS",
    "MappingRule",
    "ProcessingOptions",
    "TemplateFormat",
    "TemplateFormatKind",
    "Transform",
    "resolve_transform",
]
