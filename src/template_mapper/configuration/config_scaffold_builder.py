"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "template-mapper.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Configuration for template-mapper.
# Every value below is the built-in default; remove a key to keep the default.

repository:
  # Directory that relative template paths are resolved against.
  # Relative values are resolved against this file's directory.
  # Leave unset to use the current working directory.
  # base_directory: "templates"
  encoding: "utf-8"
  # Keep at most this many loaded templates, evicting the least recently used.
  # Leave unset for an unbounded cache.
  # cache_capacity: 128

processing:
  # Upper bound accepted for max_concurrency.
  max_concurrency_limit: 100
  parallel: true
  max_concurrency: 5
  continue_on_error: false
"""


def build_placeholder_configuration() -> str:
    """Build a YAML configuration template with defaults and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
