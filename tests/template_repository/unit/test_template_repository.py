"""Template repository tests against an in-memory file system."""

from __future__ import annotations

import json
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest
from template_mapper.core import (
    EmptyInput,
    Err,
    FileExtensionMismatch,
    InvalidFormat,
    InvalidResponse,
    MissingRequiredField,
    Ok,
    ProcessingStageError,
    ReadError,
    SecurityViolation,
    WriteError,
)
from template_mapper.template_entities import Template
from template_mapper.template_paths import TemplatePath
from template_mapper.template_repository import CacheStats, TemplateCache, TemplateRepository

BASE = Path("/templates")


class FakeFileSystem:
    def __init__(self, files: dict[str, str] | None = None) -> None:
        self.files = {str(BASE / name): content for name, content in (files or {}).items()}
        self.reads: list[Path] = []
        self.writes: list[tuple[Path, str, str]] = []
        self.read_delay = 0.0
        self.read_error: Exception | None = None
        self.write_error: OSError | None = None
        self.stat_error: OSError | None = None

    def read_text(self, path: Path, encoding: str) -> str:
        self.reads.append(path)
        if self.read_delay:
            time.sleep(self.read_delay)
        if self.read_error is not None:
            raise self.read_error
        try:
            return self.files[str(path)]
        except KeyError:
            raise FileNotFoundError(f"No such file: {path}") from None

    def write_text(self, path: Path, content: str, encoding: str) -> None:
        if self.write_error is not None:
            raise self.write_error
        self.writes.append((path, content, encoding))
        self.files[str(path)] = content

    def stat(self, path: Path) -> os.stat_result:
        if self.stat_error is not None:
            raise self.stat_error
        if str(path) not in self.files:
            raise FileNotFoundError(f"No such file: {path}")
        return os.stat_result((0o100644, 0, 0, 1, 0, 0, len(self.files[str(path)]), 0, 0, 0))


def _invoice_body(**overrides: object) -> str:
    body: dict[str, object] = {
        "format": "json",
        "description": "Invoice export",
        "mappings": [
            {"source": "customer.name", "target": "billing.name"},
            {"source": "total", "target": "amount", "transform": "float"},
        ],
    }
    body.update(overrides)
    return json.dumps(body)


def _repository(
    files: dict[str, str] | None = None, **kwargs: object
) -> tuple[TemplateRepository, FakeFileSystem]:
    file_system = FakeFileSystem(files)
    repository = TemplateRepository(file_system=file_system, base_directory=BASE, **kwargs)
    return repository, file_system


def test_load_builds_template_from_file_body() -> None:
    repository, _ = _repository({"invoice.json": _invoice_body()})

    result = repository.load("invoice.json")

    assert isinstance(result, Ok)
    template = result.data
    assert template.get_id().get_value() == "invoice.json"
    assert template.get_format().get_format() == "json"
    assert template.get_format().get_template() == _invoice_body()
    assert template.get_description() == "Invoice export"
    assert [(rule.get_source(), rule.get_target()) for rule in template.get_mapping_rules()] == [
        ("customer.name", "billing.name"),
        ("total", "amount"),
    ]
    assert template.apply_rules({"customer": {"name": "Ada"}, "total": "9.5"}) == {
        "billing": {"name": "Ada"},
        "amount": 9.5,
    }


def test_load_returns_cached_instance_without_reading_again() -> None:
    repository, file_system = _repository({"invoice.json": _invoice_body()})

    first = repository.load("invoice.json")
    second = repository.load("invoice.json")

    assert isinstance(first, Ok)
    assert isinstance(second, Ok)
    assert first.data is second.data
    assert len(file_system.reads) == 1


def test_load_accepts_template_path_values() -> None:
    repository, file_system = _repository({"invoice.json": _invoice_body()})
    template_path = TemplatePath.create("invoice.json")
    assert isinstance(template_path, Ok)

    by_value = repository.load(template_path.data)
    by_string = repository.load("invoice.json")

    assert isinstance(by_value, Ok)
    assert isinstance(by_string, Ok)
    assert by_value.data is by_string.data
    assert file_system.reads == [BASE / "invoice.json"]


def test_load_defaults_format_to_file_kind() -> None:
    repository, _ = _repository({"invoice.yaml": "mappings:\n  - source: a\n    target: b\n"})

    result = repository.load("invoice.yaml")

    assert isinstance(result, Ok)
    assert result.data.get_format().get_format() == "yaml"
    assert result.data.get_description() == ""


def test_load_with_empty_mapping_list_produces_template_without_rules() -> None:
    repository, _ = _repository({"empty.json": "{}"})

    result = repository.load("empty.json")

    assert isinstance(result, Ok)
    assert result.data.get_mapping_rules() == ()
    assert result.data.apply_rules({"a": 1}) == {}


def test_load_rejects_blank_path_before_touching_file_system() -> None:
    repository, file_system = _repository()

    assert repository.load("") == Err(EmptyInput(field="template_path"))
    assert file_system.reads == []


def test_load_rejects_unsupported_extension() -> None:
    repository, file_system = _repository()

    result = repository.load("template.txt")

    assert isinstance(result, Err)
    assert isinstance(result.error, FileExtensionMismatch)
    assert file_system.reads == []


@pytest.mark.parametrize("path", ["../secrets.json", "nested/../../x.yaml", "~/templates/a.json"])
def test_load_rejects_path_traversal(path: str) -> None:
    repository, file_system = _repository()

    result = repository.load(path)

    assert result == Err(SecurityViolation(path=path, reason="Path traversal not allowed"))
    assert file_system.reads == []


def test_load_reports_missing_file_as_read_error_and_does_not_cache() -> None:
    repository, file_system = _repository()

    first = repository.load("missing.json")
    second = repository.load("missing.json")

    assert isinstance(first, Err)
    assert isinstance(first.error, ReadError)
    assert first.error.path == str(BASE / "missing.json")
    assert isinstance(second, Err)
    assert len(file_system.reads) == 2
    assert repository.get_cache_stats().size == 0


def test_load_reports_unparseable_body_as_invalid_format() -> None:
    repository, _ = _repository({"broken.json": "{not json"})

    result = repository.load("broken.json")

    assert isinstance(result, Err)
    assert isinstance(result.error, InvalidFormat)
    assert result.error.input == "{not json"
    assert "JSON object" in result.error.expected_format


def test_load_reports_non_mapping_root_as_invalid_format() -> None:
    repository, _ = _repository({"list.yaml": "- a\n- b\n"})

    result = repository.load("list.yaml")

    assert isinstance(result, Err)
    assert isinstance(result.error, InvalidFormat)


def test_load_wraps_creation_failures_with_stage() -> None:
    repository, _ = _repository({"bad.json": _invoice_body(format="xml")})

    result = repository.load("bad.json")

    assert isinstance(result, Err)
    assert isinstance(result.error, ProcessingStageError)
    assert result.error.stage == "template creation"
    assert isinstance(result.error.error, InvalidFormat)


def test_load_wraps_invalid_mapping_entries_with_stage() -> None:
    body = _invoice_body(mappings=[{"source": "a"}])
    repository, _ = _repository({"bad.json": body})

    result = repository.load("bad.json")

    assert result == Err(
        ProcessingStageError(stage="template creation", error=EmptyInput(field="target"))
    )


def test_load_wraps_unknown_transform_with_stage() -> None:
    body = _invoice_body(mappings=[{"source": "a", "target": "b", "transform": "explode"}])
    repository, _ = _repository({"bad.json": body})

    result = repository.load("bad.json")

    assert isinstance(result, Err)
    assert isinstance(result.error, ProcessingStageError)
    assert isinstance(result.error.error, InvalidFormat)


def test_load_turns_unexpected_exceptions_into_loading_stage_errors() -> None:
    repository, file_system = _repository({"invoice.json": _invoice_body()})
    file_system.read_error = RuntimeError("disk controller exploded")

    result = repository.load("invoice.json")

    assert result == Err(
        ProcessingStageError(
            stage="template loading",
            error=InvalidResponse(service="template loader", response="disk controller exploded"),
        )
    )


def test_load_reports_undecodable_file_as_read_error() -> None:
    repository, file_system = _repository({"invoice.json": _invoice_body()})
    file_system.read_error = UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")

    result = repository.load("invoice.json")

    assert isinstance(result, Err)
    assert isinstance(result.error, ReadError)
    assert result.error.path == str(BASE / "invoice.json")
    assert "invalid start byte" in result.error.details
    assert repository.get_cache_stats().size == 0


def test_load_treats_null_description_as_empty() -> None:
    repository, _ = _repository({"invoice.json": _invoice_body(description=None)})

    result = repository.load("invoice.json")

    assert isinstance(result, Ok)
    assert result.data.get_description() == ""


def test_load_treats_null_format_as_file_kind() -> None:
    repository, _ = _repository({"invoice.json": _invoice_body(format=None)})

    result = repository.load("invoice.json")

    assert isinstance(result, Ok)
    assert result.data.get_format().get_format() == "json"


def test_load_adds_identity_rules_for_placeholders_after_explicit_mappings() -> None:
    body = json.dumps(
        {
            "mappings": [{"source": "customer.name", "target": "billing.name"}],
            "body": {"title": "{title}", "total": "{{total}}"},
        }
    )
    repository, _ = _repository({"invoice.json": body})

    result = repository.load("invoice.json")

    assert isinstance(result, Ok)
    rules = [(rule.get_source(), rule.get_target()) for rule in result.data.get_mapping_rules()]
    assert rules == [
        ("customer.name", "billing.name"),
        ("title", "title"),
        ("total", "total"),
    ]
    assert result.data.apply_rules({"title": "Invoice", "total": 3}) == {
        "title": "Invoice",
        "total": 3,
    }


def test_concurrent_loads_of_one_path_read_once() -> None:
    repository, file_system = _repository({"invoice.json": _invoice_body()})
    file_system.read_delay = 0.05

    with ThreadPoolExecutor(max_workers=8) as executor:
        results = list(executor.map(lambda _: repository.load("invoice.json"), range(8)))

    assert len(file_system.reads) == 1
    templates = [result.data for result in results if isinstance(result, Ok)]
    assert len(templates) == 8
    assert all(template is templates[0] for template in templates)


def test_save_writes_body_and_caches_template() -> None:
    repository, file_system = _repository({"invoice.json": _invoice_body()})
    loaded = repository.load("invoice.json")
    assert isinstance(loaded, Ok)

    result = repository.save("copy.json", loaded.data)

    assert result == Ok(None)
    assert file_system.writes == [(BASE / "copy.json", _invoice_body(), "utf-8")]
    reloaded = repository.load("copy.json")
    assert isinstance(reloaded, Ok)
    assert reloaded.data is loaded.data
    assert len(file_system.reads) == 1


def test_save_reports_write_failures() -> None:
    repository, file_system = _repository({"invoice.json": _invoice_body()})
    loaded = repository.load("invoice.json")
    assert isinstance(loaded, Ok)
    file_system.write_error = PermissionError("read-only")

    result = repository.save("copy.json", loaded.data)

    assert result == Err(WriteError(path=str(BASE / "copy.json"), details="read-only"))
    assert repository.get_cached("copy.json") is None


def test_save_rejects_unsafe_path() -> None:
    repository, file_system = _repository({"invoice.json": _invoice_body()})
    loaded = repository.load("invoice.json")
    assert isinstance(loaded, Ok)

    result = repository.save("../escape.json", loaded.data)

    assert isinstance(result, Err)
    assert isinstance(result.error, SecurityViolation)
    assert file_system.writes == []


def test_validate_accepts_loaded_template() -> None:
    repository, _ = _repository({"invoice.json": _invoice_body()})
    loaded = repository.load("invoice.json")
    assert isinstance(loaded, Ok)

    assert repository.validate(loaded.data) == Ok(None)


def test_validate_reports_missing_identity_or_format() -> None:
    repository, _ = _repository()
    incomplete = Template(id=None, format=None, mapping_rules=())  # type: ignore[arg-type]

    assert repository.validate(incomplete) == Err(MissingRequiredField(fields=("id", "format")))


def test_exists_distinguishes_missing_files_from_errors() -> None:
    repository, file_system = _repository({"invoice.json": _invoice_body()})

    assert repository.exists("invoice.json") == Ok(True)
    assert repository.exists("other.json") == Ok(False)

    file_system.stat_error = PermissionError("denied")
    result = repository.exists("invoice.json")
    assert result == Err(ReadError(path=str(BASE / "invoice.json"), details="denied"))


def test_exists_validates_path_first() -> None:
    repository, _ = _repository()

    result = repository.exists("notes.txt")

    assert isinstance(result, Err)
    assert isinstance(result.error, FileExtensionMismatch)


def test_get_base_directory_reports_configured_directory() -> None:
    repository, _ = _repository()

    assert repository.get_base_directory() == Ok(BASE)


def test_get_base_directory_defaults_to_working_directory() -> None:
    repository = TemplateRepository(file_system=FakeFileSystem())

    assert repository.get_base_directory() == Ok(Path.cwd())


def test_clear_cache_forces_reload() -> None:
    repository, file_system = _repository({"a.json": "{}", "b.json": "{}"})
    repository.load("a.json")
    repository.load("b.json")

    repository.clear_cache("a.json")
    assert repository.get_cached("a.json") is None
    assert repository.get_cached("b.json") is not None

    repository.clear_cache()
    assert repository.get_cache_stats().size == 0
    repository.load("b.json")
    assert len(file_system.reads) == 3


def test_cache_stats_list_canonical_keys_in_insertion_order() -> None:
    repository, _ = _repository({"b.json": "{}", "a.json": "{}"})
    repository.load("b.json")
    repository.load("a.json")
    repository.load("b.json")

    stats = repository.get_cache_stats()

    assert stats.size == 2
    assert stats.keys == (str(BASE / "b.json"), str(BASE / "a.json"))


def test_cache_capacity_evicts_least_recently_used() -> None:
    repository, file_system = _repository(
        {"a.json": "{}", "b.json": "{}", "c.json": "{}"}, cache_capacity=2
    )
    repository.load("a.json")
    repository.load("b.json")
    repository.load("a.json")
    repository.load("c.json")

    assert repository.get_cached("b.json") is None
    assert repository.get_cache_stats().keys == (str(BASE / "a.json"), str(BASE / "c.json"))
    repository.load("b.json")
    assert len(file_system.reads) == 4


def test_template_cache_rejects_non_positive_capacity() -> None:
    with pytest.raises(ValueError):
        TemplateCache(capacity=0)


def test_key_lock_blocks_second_holder_of_same_key() -> None:
    cache = TemplateCache()
    entered = threading.Event()

    def hold() -> None:
        with cache.key_lock("a"):
            entered.set()

    with cache.key_lock("a"):
        worker = threading.Thread(target=hold)
        worker.start()
        assert not entered.wait(0.05)
        assert cache.stats().pending_loads == 1
    worker.join(timeout=1)

    assert entered.is_set()
    assert cache.stats().pending_loads == 0


def test_key_locks_of_different_keys_are_independent() -> None:
    cache = TemplateCache()

    with cache.key_lock("a"), cache.key_lock("b"):
        assert cache.stats().pending_loads == 2

    assert cache.stats().pending_loads == 0


def test_key_lock_is_released_when_the_body_raises() -> None:
    cache = TemplateCache()

    with pytest.raises(RuntimeError), cache.key_lock("a"):
        raise RuntimeError("load failed")

    assert cache.stats().pending_loads == 0
    with cache.key_lock("a"):
        assert cache.stats().pending_loads == 1


def test_key_lock_table_does_not_grow_with_distinct_paths() -> None:
    files = {f"t{index}.json": "{}" for index in range(50)}
    repository, _ = _repository(files, cache_capacity=2)

    for name in files:
        assert isinstance(repository.load(name), Ok)
    repository.load("missing.json")

    stats = repository.get_cache_stats()
    assert stats.size == 2
    assert stats.pending_loads == 0
    repository.clear_cache()
    assert repository.get_cache_stats() == CacheStats(size=0, keys=(), pending_loads=0)


def test_key_lock_is_held_only_while_a_load_runs() -> None:
    observed: list[int] = []

    class ObservingFileSystem(FakeFileSystem):
        def read_text(self, path: Path, encoding: str) -> str:
            observed.append(repository.get_cache_stats().pending_loads)
            return super().read_text(path, encoding)

    file_system = ObservingFileSystem({"invoice.json": _invoice_body()})
    repository = TemplateRepository(file_system=file_system, base_directory=BASE)

    assert isinstance(repository.load("invoice.json"), Ok)

    assert observed == [1]
    assert repository.get_cache_stats().pending_loads == 0

def test_preload_collects_templates_and_failures() -> None:
    repository, _ = _repository({"a.json": "{}", "b.yaml": "description: B\n"})

    result = repository.preload(["a.json", "missing.json", "b.yaml", "bad.txt"])

    assert isinstance(result, Ok)
    report = result.data
    assert [template.get_id().get_value() for template in report.loaded] == ["a.json", "b.yaml"]
    assert [failure.path for failure in report.failures] == ["missing.json", "bad.txt"]
    assert isinstance(report.failures[0].error, ReadError)
    assert isinstance(report.failures[1].error, FileExtensionMismatch)
