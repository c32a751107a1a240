"""Construction and formatting of error contexts.

The domain factories below only assemble fields: each one fixes the
``error_type`` tag and the recovery guidance for one kind of failure so that
every call site reports it the same way.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import asdict
from typing import assert_never

from template_mapper.core import (
    DomainError,
    EmptyInput,
    FileExtensionMismatch,
    InvalidFormat,
    InvalidResponse,
    MissingRequiredField,
    OutOfRange,
    ProcessingStageError,
    ReadError,
    SecurityViolation,
    WriteError,
    error_message,
)

from .context_models import (
    BasicMetrics,
    ComprehensiveContext,
    ComprehensiveMetrics,
    DetailedContext,
    ErrorContextState,
    LegacyErrorContextData,
    MinimalContext,
    NoMetrics,
    PerformanceMetrics,
    PerformanceMetricsState,
    StandardContext,
    ThroughputMetrics,
)

_UNKNOWN = "unknown"


def create_minimal(operation: str, location: str) -> MinimalContext:
    return MinimalContext(operation=operation, location=location)


def create_standard(operation: str, location: str, inputs: str, error_type: str) -> StandardContext:
    return StandardContext(
        operation=operation, location=location, inputs=inputs, error_type=error_type
    )


def create_detailed(  # pylint: disable=too-many-arguments
    operation: str,
    location: str,
    inputs: str,
    error_type: str,
    decisions: Sequence[str],
    progress: str,
    recovery_guidance: Sequence[str],
) -> DetailedContext:
    return DetailedContext(
        operation=operation,
        location=location,
        inputs=inputs,
        error_type=error_type,
        decisions=tuple(decisions),
        progress=progress,
        recovery_guidance=tuple(recovery_guidance),
    )


def create_comprehensive(  # pylint: disable=too-many-arguments
    operation: str,
    location: str,
    inputs: str,
    error_type: str,
    decisions: Sequence[str],
    progress: str,
    recovery_guidance: Sequence[str],
    additional_data: Mapping[str, object],
    context_depth: int,
    parent_context: ErrorContextState | None = None,
) -> ComprehensiveContext:
    return ComprehensiveContext(
        operation=operation,
        location=location,
        inputs=inputs,
        error_type=error_type,
        decisions=tuple(decisions),
        progress=progress,
        recovery_guidance=tuple(recovery_guidance),
        additional_data=dict(additional_data),
        context_depth=context_depth,
        parent_context=parent_context,
    )


def from_legacy(data: LegacyErrorContextData) -> ErrorContextState:
    """Convert a free-form record to the highest level its populated fields allow."""
    if (
        data.additional_data is not None
        and data.context_depth is not None
        and data.parent_context is not None
    ):
        return create_comprehensive(
            data.operation,
            data.location,
            data.inputs or "",
            data.error_type or _UNKNOWN,
            data.decisions or (),
            data.progress or "",
            data.recovery_guidance or (),
            data.additional_data,
            data.context_depth,
            from_legacy(data.parent_context),
        )
    if (
        data.decisions is not None
        and data.progress
        and data.recovery_guidance is not None
    ):
        return create_detailed(
            data.operation,
            data.location,
            data.inputs or "",
            data.error_type or _UNKNOWN,
            data.decisions,
            data.progress,
            data.recovery_guidance,
        )
    if data.inputs and data.error_type:
        return create_standard(data.operation, data.location, data.inputs, data.error_type)
    return create_minimal(data.operation, data.location)


def context_depth(context: ErrorContextState) -> int:
    if isinstance(context, ComprehensiveContext):
        return context.context_depth
    return 0


def create_schema_error(
    operation: str, location: str, schema_path: str, error_details: str | None = None
) -> DetailedContext:
    return create_detailed(
        f"Schema: {operation}",
        location,
        f'schema_path="{schema_path}", error_type={error_details or _UNKNOWN}',
        "SchemaValidationError",
        ("Schema validation strategy - Detected validation failure",),
        "",
        (
            "Verify schema file exists and is readable",
            "Validate JSON syntax using a JSON validator",
            "Check schema follows JSON Schema draft-07 specification",
            "Ensure all required properties are defined",
        ),
    )


def create_template_error(
    operation: str, location: str, template_path: str, schema_path: str | None = None
) -> DetailedContext:
    return create_detailed(
        f"Template: {operation}",
        location,
        f'template_path="{template_path}", schema_path="{schema_path or _UNKNOWN}"',
        "TemplateResolutionError",
        ("Template resolution strategy - Template path resolution failed",),
        "",
        (
            "Verify template file exists in expected location",
            "Check template file permissions are readable",
            "Ensure the template path ends with .json, .yaml, .yml or .toml",
            "Verify template file contains a valid object with a mappings list",
        ),
    )


def create_frontmatter_error(
    operation: str, location: str, file_path: str, line_number: int | None = None
) -> DetailedContext:
    return create_detailed(
        f"Frontmatter: {operation}",
        location,
        f'file_path="{file_path}", line={line_number or _UNKNOWN}',
        "FrontmatterParsingError",
        ("Frontmatter parsing strategy - YAML parsing failed",),
        "",
        (
            "Verify frontmatter uses valid YAML syntax",
            "Check for proper --- delimiters at start and end",
            "Ensure no tabs are used (spaces only for indentation)",
            "Validate special characters are properly quoted",
        ),
    )


def create_no_metrics() -> NoMetrics:
    return NoMetrics()


def create_basic_metrics(duration_ms: float) -> BasicMetrics:
    return BasicMetrics(duration_ms=duration_ms)


def create_throughput_metrics(duration_ms: float, files_per_second: float) -> ThroughputMetrics:
    return ThroughputMetrics(duration_ms=duration_ms, files_per_second=files_per_second)


def create_comprehensive_metrics(
    duration_ms: float,
    files_per_second: float,
    memory_peak_mb: float,
    current_batch_size: int,
    recommended_batch_size: int,
) -> ComprehensiveMetrics:
    return ComprehensiveMetrics(
        duration_ms=duration_ms,
        files_per_second=files_per_second,
        memory_peak_mb=memory_peak_mb,
        current_batch_size=current_batch_size,
        recommended_batch_size=recommended_batch_size,
    )


def metrics_from_state(state: PerformanceMetricsState) -> PerformanceMetrics:
    """Flatten a measurement level into the optional-field record."""
    match state:
        case NoMetrics():
            return PerformanceMetrics()
        case BasicMetrics():
            return PerformanceMetrics(duration_ms=state.duration_ms)
        case ThroughputMetrics():
            return PerformanceMetrics(
                duration_ms=state.duration_ms, files_per_second=state.files_per_second
            )
        case ComprehensiveMetrics():
            return PerformanceMetrics(
                files_per_second=state.files_per_second,
                memory_peak_mb=state.memory_peak_mb,
                recommended_batch_size=state.recommended_batch_size,
                current_batch_size=state.current_batch_size,
                duration_ms=state.duration_ms,
            )
        case _:
            assert_never(state)


def create_performance_error(
    operation: str, location: str, metrics: PerformanceMetrics | PerformanceMetricsState
) -> ComprehensiveContext:
    if not isinstance(metrics, PerformanceMetrics):
        metrics = metrics_from_state(metrics)
    file_count = metrics.current_batch_size or _UNKNOWN
    duration = metrics.duration_ms or _UNKNOWN
    return create_comprehensive(
        f"Performance: {operation}",
        location,
        f"file_count={file_count}, duration={duration}ms",
        "PerformanceError",
        ("Performance optimization strategy - Processing limits exceeded",),
        "",
        (
            f"Reduce batch size to {metrics.recommended_batch_size or 100}-200 files per batch",
            "Enable streaming mode for datasets >1000 files",
            "Consider parallel processing with worker threads",
            "Monitor memory usage and release large intermediate results",
        ),
        {"performance_metrics": asdict(metrics)},
        0,
    )


def create_file_system_error(
    operation: str, location: str, file_path: str, system_error: str | None = None
) -> DetailedContext:
    return create_detailed(
        f"FileSystem: {operation}",
        location,
        f'file_path="{file_path}", system_error="{system_error or _UNKNOWN}"',
        "FileSystemError",
        ("File system access strategy - Access denied or file not found",),
        "",
        (
            "Verify file path exists and is accessible",
            "Check file permissions (read/write as needed)",
            "Ensure parent directory exists for output files",
            "Verify sufficient disk space for write operations",
        ),
    )


def create_pipeline_error(
    operation: str, location: str, stage: str, progress: str
) -> DetailedContext:
    return create_detailed(
        f"Pipeline: {operation}",
        location,
        f'stage="{stage}", progress="{progress}"',
        "PipelineExecutionError",
        ("Pipeline execution strategy - Stage processing failed",),
        f"Pipeline Processing: {stage} ({progress})",
        (
            "Review previous pipeline stages for cascading failures",
            "Check input data validity and format",
            "Verify all required dependencies are available",
            "Consider running with --verbose logging enabled",
        ),
    )


def create_validation_error(
    operation: str,
    location: str,
    validation_target: str,
    validation_rules: Sequence[str],
    failed_rules: Sequence[str],
) -> ComprehensiveContext:
    return create_comprehensive(
        f"Validation: {operation}",
        location,
        f'target="{validation_target}", rules_count={len(validation_rules)}',
        "ValidationError",
        (f"Validation strategy - {len(failed_rules)} validation rules failed",),
        "",
        (
            "Review failed validation rules and correct input data",
            "Ensure data types match expected schema definitions",
            "Check for required fields that may be missing",
            "Validate data format matches expected patterns",
        ),
        {"validation_rules": tuple(validation_rules), "failed_rules": tuple(failed_rules)},
        0,
    )


def create_child_context(
    parent_context: ErrorContextState,
    operation: str,
    location: str,
    inputs: str | None = None,
) -> ComprehensiveContext:
    """Nest a context below ``parent_context``, one level deeper."""
    return create_comprehensive(
        operation,
        location,
        inputs or "",
        _UNKNOWN,
        ("Child operation execution - Nested processing failure",),
        "",
        (
            "Review parent operation context for root cause",
            "Verify child operation inputs are valid",
            "Check for cascading failures from parent operations",
        ),
        {},
        context_depth(parent_context) + 1,
        parent_context,
    )


def create_custom_error(
    operation: str,
    location: str,
    error_type: str,
    recovery_guidance: Sequence[str],
    additional_data: Mapping[str, object] | None = None,
) -> DetailedContext | ComprehensiveContext:
    decisions = ("Custom error handling strategy - Specific error condition detected",)
    if additional_data is None:
        return create_detailed(
            operation, location, "", error_type, decisions, "", recovery_guidance
        )
    return create_comprehensive(
        operation,
        location,
        "",
        error_type,
        decisions,
        "",
        recovery_guidance,
        additional_data,
        0,
    )


def context_for_error(error: DomainError, location: str) -> ErrorContextState:
    """Pick the domain factory that explains ``error``."""
    match error:
        case ReadError(path=path, details=details):
            return create_file_system_error("read", location, path, details)
        case WriteError(path=path, details=details):
            return create_file_system_error("write", location, path, details)
        case FileExtensionMismatch(path=path) | SecurityViolation(path=path):
            return create_template_error("path validation", location, path)
        case InvalidFormat(expected_format=expected):
            return create_validation_error("format", location, expected, (expected,), (expected,))
        case EmptyInput(field=field):
            rules = ("non-empty",)
            return create_validation_error("empty input", location, field or "input", rules, rules)
        case OutOfRange(value=value, min=low, max=high):
            rule = f"{low}..{high}"
            return create_validation_error("range", location, str(value), (rule,), (rule,))
        case MissingRequiredField(fields=fields):
            return create_validation_error("required fields", location, "template", fields, fields)
        case InvalidResponse(service=service, response=response):
            return create_custom_error(
                f"Collaborator: {service}",
                location,
                "InvalidResponseError",
                ("Inspect the reported response for the underlying failure",),
                {"response": response},
            )
        case ProcessingStageError(stage=stage, error=inner):
            parent = create_pipeline_error(stage, location, stage, "failed")
            return create_child_context(
                parent, context_for_error(inner, location).operation, location, error_message(inner)
            )
        case _:
            assert_never(error)


def format_context(context: ErrorContextState) -> str:
    """Render the context as one labelled line per populated section."""
    inputs = error_type = progress = ""
    decisions: tuple[str, ...] = ()
    guidance: tuple[str, ...] = ()
    depth = 0
    parent: ErrorContextState | None = None

    match context:
        case MinimalContext():
            pass
        case StandardContext():
            inputs, error_type = context.inputs, context.error_type
        case DetailedContext():
            inputs, error_type = context.inputs, context.error_type
            decisions, progress, guidance = (
                context.decisions,
                context.progress,
                context.recovery_guidance,
            )
        case ComprehensiveContext():
            inputs, error_type = context.inputs, context.error_type
            decisions, progress, guidance = (
                context.decisions,
                context.progress,
                context.recovery_guidance,
            )
            depth, parent = context.context_depth, context.parent_context
        case _:
            assert_never(context)

    lines = [f"Operation: {context.operation}", f"Location: {context.location}"]
    if inputs:
        lines.append(f"Inputs: {inputs}")
    if error_type:
        lines.append(f"Error Type: {error_type}")
    if progress:
        lines.append(f"Progress: {progress}")
    if decisions:
        lines.append(f"Decisions: {'; '.join(decisions)}")
    if guidance:
        lines.append("Recovery Guidance:")
        lines.extend(f"  {index}. {item}" for index, item in enumerate(guidance, start=1))
    if depth > 0:
        lines.append(f"Context Depth: {depth}")
    if parent is not None:
        lines.append(f"Parent Context: {parent.operation}")
    return "\n".join(lines)
