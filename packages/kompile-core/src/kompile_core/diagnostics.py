"""Result and diagnostics shaping.

Normalizes what backends return before it reaches the caller:
- Diagnostic keys are restricted to files of the originating project;
  foreign ERROR diagnostics are re-keyed, never dropped
- A Compiled result carrying ERROR diagnostics is demoted to NotCompiled
- Diagnostics render to the one-line report format used by compile.err

Positions are stored 0-based; the report converts them to 1-based.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

import structlog

from kompile_core.schemas import (
    CompilationResult,
    Compiled,
    CompilerDiagnostics,
    ErrorDescriptor,
    ExecutionResult,
    NotCompiled,
)

if TYPE_CHECKING:
    from kompile_core.schemas import Project

logger = structlog.get_logger(__name__)

R = TypeVar("R", bound=ExecutionResult)
T = TypeVar("T")


def format_diagnostic(file_name: str, descriptor: ErrorDescriptor) -> str:
    """Render one diagnostic as a report line.

    Format: ``<fileName>[:<line+1>[:<column+1>]]: <SEVERITY>: <message>``.
    Position segments are omitted when the diagnostic has no interval.

    Example:
        >>> d = ErrorDescriptor(
        ...     interval=TextInterval.of(4, 9, 4, 12),
        ...     message="msg",
        ...     severity=ProjectSeverity.ERROR,
        ... )
        >>> format_diagnostic("Main", d)
        'Main:5:10: ERROR: msg'
    """
    location = file_name
    if descriptor.interval is not None:
        start = descriptor.interval.start
        location += f":{start.line + 1}:{start.ch + 1}"
    return f"{location}: {descriptor.severity.value}: {descriptor.message}"


def report_lines(diagnostics: CompilerDiagnostics) -> list[str]:
    """Render every diagnostic, in file order then detection order."""
    return [
        format_diagnostic(file_name, descriptor)
        for file_name, descriptors in diagnostics.map.items()
        for descriptor in descriptors
    ]


def render_report(diagnostics: CompilerDiagnostics) -> str:
    """Render diagnostics as a newline-joined report."""
    return "\n".join(report_lines(diagnostics))


def restrict_to_project(diagnostics: CompilerDiagnostics, project: Project) -> CompilerDiagnostics:
    """Key every diagnostic by a file the project declares.

    Entries for files outside the project are dropped, except ERROR
    diagnostics: those are re-keyed to the project's first file so the
    failure they report survives shaping.

    Args:
        diagnostics: Diagnostics as returned by the backend.
        project: The originating project.

    Returns:
        ``diagnostics`` itself when every key is a project file.
    """
    names = project.file_names
    foreign = [name for name in diagnostics.map if name not in names]
    if not foreign:
        return diagnostics

    stray_errors = [d for name in foreign for d in diagnostics.map[name] if d.is_error]
    restricted = diagnostics.restricted_to(names)
    if stray_errors and names:
        restricted = restricted.merged_with(CompilerDiagnostics(map={names[0]: stray_errors}))
        logger.warning(
            "foreign_errors_rekeyed",
            files=foreign,
            errors=len(stray_errors),
            rekeyed_to=names[0],
        )
    logger.warning("foreign_diagnostics_dropped", files=foreign, project_files=names)
    return restricted


def normalize_compilation(
    result: CompilationResult[T],
    project: Project,
) -> CompilationResult[T]:
    """Shape a backend CompilationResult for the caller.

    Args:
        result: Result as returned by the backend.
        project: The originating project.

    Returns:
        The result with diagnostics restricted to project files. A Compiled
        result with ERROR diagnostics becomes NotCompiled.
    """
    diagnostics = restrict_to_project(result.compiler_diagnostics, project)

    if isinstance(result, Compiled):
        if diagnostics.has_errors:
            logger.warning(
                "compiled_result_demoted",
                errors=len(diagnostics.errors()),
                conf_type=project.conf_type.value,
            )
            return NotCompiled(compiler_diagnostics=diagnostics)
        if diagnostics is result.compiler_diagnostics:
            return result
        return result.model_copy(update={"compiler_diagnostics": diagnostics})

    if diagnostics is result.compiler_diagnostics:
        return result
    return NotCompiled(compiler_diagnostics=diagnostics)


def normalize_execution(result: R, project: Project) -> R:
    """Restrict an execution or translation result's diagnostics to project files."""
    diagnostics = restrict_to_project(result.compiler_diagnostics, project)
    if diagnostics is result.compiler_diagnostics:
        return result
    return result.model_copy(update={"compiler_diagnostics": diagnostics})
