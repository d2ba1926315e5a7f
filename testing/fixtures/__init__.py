"""Shared test fixtures for kompile packages.

Exports:
    Backends:
        RecordingJvmBackend, ErroringJvmBackend, RecordingJsBackend,
        RecordingWasmBackend, RecordingCompletionEngine: In-memory backends
        that record every call
        RecordingTelemetrySink, FailingTelemetrySink: Telemetry doubles
        error_diagnostics, clean_diagnostics: Diagnostics factories

    Projects:
        make_project, make_empty_project: Project factories

Usage:
    ```python
    from testing.fixtures import RecordingJvmBackend, make_project

    backend = RecordingJvmBackend()
    project = make_project("java")
    ```
"""

from __future__ import annotations

from testing.fixtures.backends import (
    CLASS_BYTES,
    BackendCall,
    ErroringJvmBackend,
    FailingTelemetrySink,
    RecordingCompletionEngine,
    RecordingJsBackend,
    RecordingJvmBackend,
    RecordingTelemetrySink,
    RecordingWasmBackend,
    clean_diagnostics,
    error_diagnostics,
)
from testing.fixtures.projects import HELLO_WORLD, make_empty_project, make_project

__all__ = [
    # Backends
    "BackendCall",
    "CLASS_BYTES",
    "ErroringJvmBackend",
    "FailingTelemetrySink",
    "RecordingCompletionEngine",
    "RecordingJsBackend",
    "RecordingJvmBackend",
    "RecordingTelemetrySink",
    "RecordingWasmBackend",
    "clean_diagnostics",
    "error_diagnostics",
    # Projects
    "HELLO_WORLD",
    "make_empty_project",
    "make_project",
]
