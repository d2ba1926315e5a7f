"""kompile-core: Multi-target compilation orchestration.

This package provides:
- Project, results and diagnostics models
- ProjectExecutor: Route projects to JVM, JS IR and WASM backends
- Artifact persistence and diagnostics reports
- Configuration loading and executor wiring
"""

from __future__ import annotations

__version__ = "0.1.0"

# Configuration
from kompile_core.config import (
    KompileConfig,
    build_executor,
    load_config,
)

# Diagnostics shaping
from kompile_core.diagnostics import format_diagnostic, render_report

# Error types
from kompile_core.errors import (
    BackendLoadError,
    CompletionPositionError,
    ConfigurationError,
    KompileError,
    PersistenceError,
    RoutingError,
    VersionAlreadySetError,
)

# Executor
from kompile_core.executor import ROUTES, BackendKind, ProjectExecutor, route
from kompile_core.persistence import ERROR_FILE_NAME

# Models
from kompile_core.schemas import (
    CompilationResponse,
    CompilationResult,
    Compiled,
    CompilerDiagnostics,
    Completion,
    ErrorDescriptor,
    ExecutionResult,
    ExecutionStatus,
    JvmClasses,
    NotCompiled,
    Project,
    ProjectFile,
    ProjectSeverity,
    ProjectType,
    TextInterval,
    TextPosition,
    TranslationJsResult,
    TranslationWasmResult,
    VersionInfo,
    WasmTranslationOutput,
)

__all__: list[str] = [
    "__version__",
    # Configuration
    "KompileConfig",
    "build_executor",
    "load_config",
    # Executor
    "ProjectExecutor",
    "BackendKind",
    "ROUTES",
    "route",
    # Diagnostics and persistence
    "format_diagnostic",
    "render_report",
    "ERROR_FILE_NAME",
    # Errors
    "KompileError",
    "RoutingError",
    "PersistenceError",
    "ConfigurationError",
    "BackendLoadError",
    "VersionAlreadySetError",
    "CompletionPositionError",
    # Models
    "CompilationResponse",
    "CompilationResult",
    "Compiled",
    "CompilerDiagnostics",
    "Completion",
    "ErrorDescriptor",
    "ExecutionResult",
    "ExecutionStatus",
    "JvmClasses",
    "NotCompiled",
    "Project",
    "ProjectFile",
    "ProjectSeverity",
    "ProjectType",
    "TextInterval",
    "TextPosition",
    "TranslationJsResult",
    "TranslationWasmResult",
    "VersionInfo",
    "WasmTranslationOutput",
]
