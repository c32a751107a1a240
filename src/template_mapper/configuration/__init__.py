"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .loader import ConfigurationError, build_processing_options, load_configuration
from .runtime_settings import Configuration, ProcessingSettings, RepositorySettings

__all__ = [
    "Configuration",
    "ProcessingSettings",
    "RepositorySettings",
    "ConfigurationError",
    "build_processing_options",
    "load_configuration",
    "DEFAULT_CONFIG_FILENAME",
    "build_placeholder_configuration",
    "write_placeholder_configuration",
]
