"""Command line interface entry point."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any

import click
import yaml

from template_mapper.configuration import (
    DEFAULT_CONFIG_FILENAME,
    Configuration,
    ConfigurationError,
    load_configuration,
    write_placeholder_configuration,
)
from template_mapper.core import DomainError, Err, InvalidFormat, Ok, ReadError, Result
from template_mapper.error_context import context_for_error, format_context
from template_mapper.template_entities import Template
from template_mapper.template_repository import TemplateRepository
from template_mapper.template_values import ProcessingOptions

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


class CliError(Exception):
    """Custom CLI error."""


def _domain_failure(error: DomainError, location: str) -> CliError:
    return CliError(format_context(context_for_error(error, location)))


def _load_settings(config_path: str | None) -> Configuration:
    if config_path is None:
        return Configuration()
    try:
        return load_configuration(config_path)
    except (ConfigurationError, OSError) as exc:
        raise CliError(str(exc)) from exc


def _build_repository(configuration: Configuration) -> TemplateRepository:
    settings = configuration.repository
    return TemplateRepository(
        base_directory=settings.base_directory,
        encoding=settings.encoding,
        cache_capacity=settings.cache_capacity,
    )


def _load_template(repository: TemplateRepository, template_path: str, location: str) -> Template:
    loaded = repository.load(template_path)
    if isinstance(loaded, Err):
        raise _domain_failure(loaded.error, location)
    return loaded.data


def _read_data(data_path: str) -> Result[Mapping[str, Any], DomainError]:
    path = Path(data_path)
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return Err(ReadError(path=str(path), details=str(exc)))
    try:
        parsed = json.loads(content) if path.suffix == ".json" else yaml.safe_load(content)
    except (json.JSONDecodeError, yaml.YAMLError):
        return Err(InvalidFormat(input=content, expected_format="JSON or YAML object"))
    if not isinstance(parsed, Mapping):
        return Err(InvalidFormat(input=content, expected_format="JSON or YAML object"))
    return Ok(parsed)


config_option = click.option(
    "--config",
    "config_path",
    required=False,
    type=click.Path(path_type=str),
    help="Path to the YAML configuration file",
)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="template-mapper")
@click.option("--verbose", is_flag=True, default=False, help="Log repository activity to stderr.")
def cli(verbose: bool) -> None:
    """Load mapping templates and apply them to data documents."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format=_LOG_FORMAT)


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a YAML configuration with default values and guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="inspect")
@click.argument("template_path", type=click.Path(path_type=str))
@config_option
def inspect_template(template_path: str, config_path: str | None) -> None:
    """Validate a template file and list its mapping rules."""
    repository = _build_repository(_load_settings(config_path))
    template = _load_template(repository, template_path, "cli.inspect")

    click.echo(f"id: {template.get_id()}")
    click.echo(f"format: {template.get_format().get_format()}")
    if template.get_description():
        click.echo(f"description: {template.get_description()}")
    rules = template.get_mapping_rules()
    click.echo(f"mappings: {len(rules)}")
    for rule in rules:
        click.echo(f"  {rule.get_source()} -> {rule.get_target()}")


@cli.command(name="map")
@click.argument("template_path", type=click.Path(path_type=str))
@click.argument("data_paths", nargs=-1, required=True, type=click.Path(path_type=str))
@config_option
@click.option(
    "--max-concurrency",
    type=int,
    default=None,
    help="Number of data files mapped at once (defaults to the configured value)",
)
@click.option(
    "--continue-on-error",
    is_flag=True,
    default=False,
    help="Report unreadable data files and keep mapping the rest",
)
def map_data(
    template_path: str,
    data_paths: tuple[str, ...],
    config_path: str | None,
    max_concurrency: int | None,
    continue_on_error: bool,
) -> None:
    """Apply a template to each DATA file and print one JSON line per file."""
    configuration = _load_settings(config_path)
    options = _resolve_options(configuration, max_concurrency, continue_on_error)
    template = _load_template(_build_repository(configuration), template_path, "cli.map")

    documents = _read_all(data_paths, options)
    failed = False
    for data_path, document in zip(data_paths, documents):
        if isinstance(document, Err):
            failure = _domain_failure(document.error, f"cli.map {data_path}")
            if not options.should_continue_on_error():
                raise failure
            click.echo(str(failure), err=True)
            failed = True
            continue
        click.echo(json.dumps(template.apply_rules(document.data), sort_keys=True, default=str))
    if failed:
        raise CliError("One or more data files could not be mapped.")


def _resolve_options(
    configuration: Configuration, max_concurrency: int | None, continue_on_error: bool
) -> ProcessingOptions:
    settings = configuration.processing
    options = ProcessingOptions.create(
        {
            "parallel": settings.parallel,
            "max_concurrency": (
                settings.max_concurrency if max_concurrency is None else max_concurrency
            ),
            "continue_on_error": continue_on_error or settings.continue_on_error,
        },
        max_limit=settings.max_concurrency_limit,
    )
    if isinstance(options, Err):
        raise _domain_failure(options.error, "cli.map options")
    return options.data


def _read_all(
    data_paths: tuple[str, ...], options: ProcessingOptions
) -> list[Result[Mapping[str, Any], DomainError]]:
    if not options.is_parallel() or len(data_paths) < 2:
        return [_read_data(path) for path in data_paths]
    with ThreadPoolExecutor(max_workers=options.get_max_concurrency()) as executor:
        return list(executor.map(_read_data, data_paths))


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
