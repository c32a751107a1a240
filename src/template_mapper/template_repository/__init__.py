"""Template repository exports."""

from .body_parser import extract_mapping_rules, extract_placeholders, parse_template_body
from .file_system import LocalTemplateFileSystem, TemplateFileSystem
from .repository import PreloadFailure, PreloadReport, TemplateRepository
from .template_cache import CacheStats, TemplateCache

__all__ = [
    "CacheStats",
    "LocalTemplateFileSystem",
    "PreloadFailure",
    "PreloadReport",
    "TemplateCache",
    "TemplateFileSystem",
    "TemplateRepository",
    "extract_mapping_rules",
    "extract_placeholders",
    "parse_template_body",
]
