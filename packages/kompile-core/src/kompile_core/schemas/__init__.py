"""Pydantic models for kompile.

This package exports the input and output contracts of the executor:
- Project, ProjectFile, ProjectType: What to compile
- CompilerDiagnostics and friends: What the backends report
- CompilationResult, ExecutionResult and translation results: What callers get back
- Completion, VersionInfo: Auxiliary models
"""

from __future__ import annotations

from kompile_core.schemas.completion import Completion, VersionInfo
from kompile_core.schemas.diagnostics import (
    CompilerDiagnostics,
    ErrorDescriptor,
    ExceptionDescriptor,
    ProjectSeverity,
    TextInterval,
    TextPosition,
)
from kompile_core.schemas.project import Project, ProjectFile, ProjectType
from kompile_core.schemas.results import (
    CompilationResponse,
    CompilationResult,
    Compiled,
    ExecutionResult,
    ExecutionStatus,
    JunitExecutionResult,
    JvmClasses,
    NotCompiled,
    TestDescription,
    TestStatus,
    TranslationJsResult,
    TranslationWasmResult,
    WasmTranslationOutput,
)

__all__: list[str] = [
    # Project
    "Project",
    "ProjectFile",
    "ProjectType",
    # Diagnostics
    "CompilerDiagnostics",
    "ErrorDescriptor",
    "ExceptionDescriptor",
    "ProjectSeverity",
    "TextInterval",
    "TextPosition",
    # Results
    "CompilationResponse",
    "CompilationResult",
    "Compiled",
    "ExecutionResult",
    "ExecutionStatus",
    "JunitExecutionResult",
    "JvmClasses",
    "NotCompiled",
    "TestDescription",
    "TestStatus",
    "TranslationJsResult",
    "TranslationWasmResult",
    "WasmTranslationOutput",
    # Auxiliary
    "Completion",
    "VersionInfo",
]
