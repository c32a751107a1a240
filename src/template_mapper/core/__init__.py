"""Result and domain error exports."""

from .domain_errors import (
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
    processing_stage_error,
    root_cause,
)
from .result import (
    Err,
    Ok,
    Result,
    combine_results,
    flat_map_result,
    map_error,
    map_result,
    unwrap_or,
)

__all__ = [
    "DomainError",
    "EmptyInput",
    "FileExtensionMismatch",
    "InvalidFormat",
    "InvalidResponse",
    "MissingRequiredField",
    "OutOfRange",
    "ProcessingStageError",
    "ReadError",
    "SecurityViolation",
    "WriteError",
    "error_message",
    "processing_stage_error",
    "root_cause",
    "Err",
    "Ok",
    "Result",
    "combine_results",
    "flat_map_result",
    "map_error",
    "map_result",
    "unwrap_or",
]
