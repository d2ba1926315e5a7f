"""Execution telemetry.

A TelemetrySink observes the outcome of every top-level run, test,
translate and compile call. Sinks are side-effect-only: whatever they do
cannot change or fail the primary operation.

Provided sinks:
- NoopTelemetrySink: Default, records nothing
- LoggingTelemetrySink: One structured log event per call
- SpanTelemetrySink: One OpenTelemetry event on the current span
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

import structlog
from opentelemetry import trace
from pydantic import BaseModel

from kompile_core.schemas import (
    CompilationResult,
    Compiled,
    ExecutionResult,
    ProjectSeverity,
    ProjectType,
)

logger = structlog.get_logger(__name__)

TelemetryResult = ExecutionResult | CompilationResult[Any]


@runtime_checkable
class TelemetrySink(Protocol):
    """Receives post-hoc execution records."""

    def record(self, result: TelemetryResult, project_type: ProjectType, version: str) -> None:
        """Record the outcome of one call."""
        ...


class NoopTelemetrySink:
    """Sink used when no telemetry is configured."""

    def record(self, result: TelemetryResult, project_type: ProjectType, version: str) -> None:
        return None


def summarize(result: BaseModel, project_type: ProjectType, version: str) -> dict[str, Any]:
    """Flatten a result into telemetry attributes.

    Args:
        result: ExecutionResult or CompilationResult.
        project_type: Target of the call.
        version: Backend version string.

    Returns:
        Dictionary of scalar attributes.
    """
    if isinstance(result, ExecutionResult):
        status = result.status.value
        has_exception = result.exception is not None
    else:
        status = "compiled" if isinstance(result, Compiled) else "not_compiled"
        has_exception = False

    diagnostics = result.compiler_diagnostics  # type: ignore[attr-defined]
    return {
        "result_type": type(result).__name__,
        "status": status,
        "conf_type": project_type.value,
        "version": version,
        "errors": diagnostics.count(ProjectSeverity.ERROR),
        "warnings": diagnostics.count(ProjectSeverity.WARNING),
        "has_exception": has_exception,
    }


class LoggingTelemetrySink:
    """Emit one ``execution_result`` log event per call.

    Example:
        >>> sink = LoggingTelemetrySink()
        >>> sink.record(ExecutionResult(text="ok"), ProjectType.JAVA, "2.0.0")
    """

    def __init__(self, event: str = "execution_result") -> None:
        self.event = event
        self._log = logger.bind(component="telemetry")

    def record(self, result: TelemetryResult, project_type: ProjectType, version: str) -> None:
        self._log.info(self.event, **summarize(result, project_type, version))


class SpanTelemetrySink:
    """Attach an event to the current OpenTelemetry span.

    Without an active span the event goes to a non-recording span and is
    dropped.
    """

    def __init__(self, event: str = "kompile.execution_result") -> None:
        self.event = event

    def record(self, result: TelemetryResult, project_type: ProjectType, version: str) -> None:
        span = trace.get_current_span()
        span.add_event(self.event, attributes=summarize(result, project_type, version))


def safe_record(
    sink: TelemetrySink,
    result: TelemetryResult,
    project_type: ProjectType,
    version: str,
) -> None:
    """Invoke ``sink`` and swallow anything it raises.

    Telemetry must never fail the operation it observes.
    """
    try:
        sink.record(result, project_type, version)
    except Exception as e:
        logger.warning(
            "telemetry_record_failed",
            sink=type(sink).__name__,
            error=str(e),
            exc_info=True,
        )
