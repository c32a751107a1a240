"""Closed set of domain error kinds returned inside ``Err`` results."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import assert_never


@dataclass(frozen=True)
class EmptyInput:
    """A required text value was missing or blank."""

    field: str | None = None


@dataclass(frozen=True)
class InvalidFormat:
    """A value did not have the expected shape."""

    input: str
    expected_format: str


@dataclass(frozen=True)
class OutOfRange:
    """A numeric value fell outside its permitted bounds."""

    value: object
    min: int | None = None
    max: int | None = None


@dataclass(frozen=True)
class FileExtensionMismatch:
    """A path did not end with any supported extension."""

    path: str
    expected: tuple[str, ...]


@dataclass(frozen=True)
class ReadError:
    path: str
    details: str | None = None


@dataclass(frozen=True)
class WriteError:
    path: str
    details: str | None = None


@dataclass(frozen=True)
class MissingRequiredField:
    fields: tuple[str, ...]


@dataclass(frozen=True)
class InvalidResponse:
    """A collaborator failed in a way outside the explicit result chain."""

    service: str
    response: object


@dataclass(frozen=True)
class SecurityViolation:
    path: str
    reason: str


@dataclass(frozen=True)
class ProcessingStageError:
    """Wraps the error of an inner layer with the stage that observed it."""

    stage: str
    error: DomainError


DomainError = (
    EmptyInput
    | InvalidFormat
    | OutOfRange
    | FileExtensionMismatch
    | ReadError
    | WriteError
    | MissingRequiredField
    | InvalidResponse
    | SecurityViolation
    | ProcessingStageError
)


def processing_stage_error(stage: str, error: DomainError) -> ProcessingStageError:
    """Attach a stage label to an error raised by an inner layer."""
    return ProcessingStageError(stage=stage, error=error)


def root_cause(error: DomainError) -> DomainError:
    """Follow stage wrappers down to the error that started the chain."""
    while isinstance(error, ProcessingStageError):
        error = error.error
    return error


def error_message(error: DomainError) -> str:
    """Render the default human-readable message for an error."""
    match error:
        case EmptyInput(field=field):
            return f"Input cannot be empty (field: {field})" if field else "Input cannot be empty"
        case InvalidFormat(input=raw, expected_format=expected):
            return f'Invalid format: expected {expected}, got "{_shorten(raw)}"'
        case OutOfRange(value=value, min=low, max=high):
            low_text = "?" if low is None else low
            high_text = "?" if high is None else high
            return f"Value {value} is out of range {low_text}-{high_text}"
        case FileExtensionMismatch(path=path, expected=expected):
            return f'File "{path}" must have one of these extensions: {", ".join(expected)}'
        case ReadError(path=path, details=details):
            return f"Failed to read from {path}" + (f": {details}" if details else "")
        case WriteError(path=path, details=details):
            return f"Failed to write to {path}" + (f": {details}" if details else "")
        case MissingRequiredField(fields=fields):
            return f"Missing required fields: {', '.join(fields)}"
        case InvalidResponse(service=service, response=response):
            return f"Invalid response from {service}: {json.dumps(response, default=str)}"
        case SecurityViolation(path=path, reason=reason):
            return f"Unsafe path {path}: {reason}"
        case ProcessingStageError(stage=stage, error=inner):
            return f'Error in processing stage "{stage}": {error_message(inner)}'
        case _:
            assert_never(error)


def _shorten(text: str, limit: int = 80) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."
