"""Configuration loader tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from template_mapper.configuration.loader import (
    ConfigurationError,
    build_processing_options,
    load_configuration,
)
from template_mapper.configuration.runtime_settings import ProcessingSettings
from template_mapper.template_values import ProcessingOptions


def _write_file(path: Path, contents: str) -> Path:
    path.write_text(contents, encoding="utf-8")
    return path


def test_loads_yaml_configuration_with_defaults(tmp_path: Path) -> None:
    config_path = _write_file(tmp_path / "template-mapper.yaml", "repository: {}\n")

    configuration = load_configuration(config_path)

    assert configuration.path == config_path
    assert configuration.repository.base_directory is None
    assert configuration.repository.encoding == "utf-8"
    assert configuration.repository.cache_capacity is None
    assert configuration.processing == ProcessingSettings()


def test_empty_file_yields_default_configuration(tmp_path: Path) -> None:
    configuration = load_configuration(_write_file(tmp_path / "empty.yaml", ""))

    assert configuration.processing.max_concurrency == 5
    assert configuration.processing.max_concurrency_limit == 100


def test_loads_every_supported_setting(tmp_path: Path) -> None:
    config_path = _write_file(
        tmp_path / "template-mapper.yaml",
        """
repository:
  base_directory: "templates"
  encoding: "latin-1"
  cache_capacity: 16
processing:
  max_concurrency_limit: 20
  parallel: false
  max_concurrency: 12
  continue_on_error: true
""",
    )

    configuration = load_configuration(config_path)

    assert configuration.repository.base_directory == (tmp_path / "templates").resolve()
    assert configuration.repository.encoding == "latin-1"
    assert configuration.repository.cache_capacity == 16
    assert configuration.processing == ProcessingSettings(
        max_concurrency_limit=20, parallel=False, max_concurrency=12, continue_on_error=True
    )


def test_keeps_absolute_base_directory(tmp_path: Path) -> None:
    absolute = tmp_path / "elsewhere"
    config_path = _write_file(
        tmp_path / "config.yaml", f'repository:\n  base_directory: "{absolute.as_posix()}"\n'
    )

    configuration = load_configuration(config_path)

    assert configuration.repository.base_directory == absolute


def test_errors_when_file_missing(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="Configuration file not found"):
        load_configuration(tmp_path / "absent.yaml")


def test_errors_when_yaml_is_invalid(tmp_path: Path) -> None:
    config_path = _write_file(tmp_path / "config.yaml", "repository: [unclosed\n")

    with pytest.raises(ConfigurationError, match="Failed to parse configuration file"):
        load_configuration(config_path)


def test_errors_when_configuration_root_is_not_mapping(tmp_path: Path) -> None:
    config_path = _write_file(tmp_path / "config.yaml", "- a\n- b\n")

    with pytest.raises(ConfigurationError, match="Configuration root must be a mapping"):
        load_configuration(config_path)


@pytest.mark.parametrize(
    ("contents", "message"),
    [
        ("repository: []\n", "Configuration section 'repository' must be a mapping"),
        ("repository:\n  encoding: 8\n", "repository.encoding must be a string"),
        ("repository:\n  cache_capacity: 0\n", "repository.cache_capacity must be greater"),
        ("repository:\n  cache_capacity: true\n", "repository.cache_capacity must be an integer"),
        ("processing:\n  parallel: 'yes'\n", "processing.parallel must be a boolean"),
        ("processing:\n  max_concurrency: five\n", "processing.max_concurrency must be an integer"),
        ("processing:\n  max_concurrency_limit: -1\n", "processing.max_concurrency_limit"),
        ("processing:\n  continue_on_error: 1\n", "processing.continue_on_error must be a boolean"),
    ],
)
def test_errors_when_setting_has_wrong_shape(tmp_path: Path, contents: str, message: str) -> None:
    config_path = _write_file(tmp_path / "config.yaml", contents)

    with pytest.raises(ConfigurationError, match=message):
        load_configuration(config_path)


def test_errors_when_concurrency_exceeds_configured_limit(tmp_path: Path) -> None:
    config_path = _write_file(
        tmp_path / "config.yaml",
        "processing:\n  max_concurrency_limit: 4\n  max_concurrency: 8\n",
    )

    with pytest.raises(ConfigurationError, match="processing: Value 8 is out of range 1-4"):
        load_configuration(config_path)


def test_build_processing_options_uses_settings() -> None:
    options = build_processing_options(
        ProcessingSettings(parallel=False, max_concurrency=3, continue_on_error=True)
    )

    assert options == ProcessingOptions(parallel=False, max_concurrency=3, continue_on_error=True)
