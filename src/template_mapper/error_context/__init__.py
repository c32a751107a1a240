"""Error context exports."""

from .context_factory import (
    context_depth,
    context_for_error,
    create_basic_metrics,
    create_child_context,
    create_comprehensive,
    create_comprehensive_metrics,
    create_custom_error,
    create_detailed,
    create_file_system_error,
    create_frontmatter_error,
    create_minimal,
    create_no_metrics,
    create_performance_error,
    create_pipeline_error,
    create_schema_error,
    create_standard,
    create_template_error,
    create_throughput_metrics,
    create_validation_error,
    format_context,
    from_legacy,
    metrics_from_state,
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

__all__ = [
    "BasicMetrics",
    "ComprehensiveContext",
    "ComprehensiveMetrics",
    "DetailedContext",
    "ErrorContextState",
    "LegacyErrorContextData",
    "MinimalContext",
    "NoMetrics",
    "PerformanceMetrics",
    "PerformanceMetricsState",
    "StandardContext",
    "ThroughputMetrics",
    "context_depth",
    "context_for_error",
    "create_basic_metrics",
    "create_child_context",
    "create_comprehensive",
    "create_comprehensive_metrics",
    "create_custom_error",
    "create_detailed",
    "create_file_system_error",
    "create_frontmatter_error",
    "create_minimal",
    "create_no_metrics",
    "create_performance_error",
    "create_pipeline_error",
    "create_schema_error",
    "create_standard",
    "create_template_error",
    "create_throughput_metrics",
    "create_validation_error",
    "format_context",
    "from_legacy",
    "metrics_from_state",
]
