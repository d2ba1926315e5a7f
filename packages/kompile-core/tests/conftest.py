"""Shared pytest fixtures for kompile-core tests.

This module provides common fixtures used across unit tests: in-memory
backends, a wired executor, and structlog configured for capture.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator

import pytest
import structlog

from kompile_core.executor import ProjectExecutor
from kompile_core.schemas import VersionInfo
from kompile_core.version import reset_version_info
from testing.fixtures import (
    RecordingCompletionEngine,
    RecordingJsBackend,
    RecordingJvmBackend,
    RecordingTelemetrySink,
    RecordingWasmBackend,
)


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout for test capture."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,  # Important for test isolation
    )


@pytest.fixture(autouse=True)
def isolated_version() -> Iterator[None]:
    """Reset the process-wide version around every test."""
    reset_version_info()
    yield
    reset_version_info()


@pytest.fixture
def version() -> VersionInfo:
    """Return the version used by test executors."""
    return VersionInfo(version="2.1.0", stdlib_version="2.1.0")


@pytest.fixture
def jvm_backend() -> RecordingJvmBackend:
    return RecordingJvmBackend()


@pytest.fixture
def js_backend() -> RecordingJsBackend:
    return RecordingJsBackend()


@pytest.fixture
def wasm_backend() -> RecordingWasmBackend:
    return RecordingWasmBackend()


@pytest.fixture
def completion_engine() -> RecordingCompletionEngine:
    return RecordingCompletionEngine()


@pytest.fixture
def telemetry() -> RecordingTelemetrySink:
    return RecordingTelemetrySink()


@pytest.fixture
def executor(
    jvm_backend: RecordingJvmBackend,
    js_backend: RecordingJsBackend,
    wasm_backend: RecordingWasmBackend,
    completion_engine: RecordingCompletionEngine,
    telemetry: RecordingTelemetrySink,
    version: VersionInfo,
) -> ProjectExecutor:
    """Return an executor wired to recording backends.

    Returns:
        ProjectExecutor with the default LocalEnvironmentProvider.
    """
    return ProjectExecutor(
        jvm_backend=jvm_backend,
        js_backend=js_backend,
        wasm_backend=wasm_backend,
        completion_engine=completion_engine,
        version=version,
        telemetry=telemetry,
    )
