"""Project executor.

The executor is the single entry point mapping (project, operation) to a
result. It routes each project to exactly one backend by target type,
scopes every backend call in a compilation context, shapes the results,
persists artifacts on request and reports telemetry.

Failure containment differs per operation kind:
- run / test / translate / compile: no local containment. Failures that
  carry diagnostics come back as normal result values. Translator faults
  arrive already shaped as INTERNAL_ERROR results by kompile_core.translation.
- complete / highlight: any exception becomes an empty result.
- compile to a directory: I/O errors propagate.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, assert_never

import structlog

from kompile_core.diagnostics import normalize_compilation, normalize_execution
from kompile_core.environment import LocalEnvironmentProvider
from kompile_core.errors import CompletionPositionError, RoutingError
from kompile_core.files import materialize
from kompile_core.persistence import save_classes_to_directory, save_errors_to_file
from kompile_core.schemas import (
    CompilationResponse,
    CompilationResult,
    Compiled,
    CompilerDiagnostics,
    Completion,
    ExecutionResult,
    JunitExecutionResult,
    JvmClasses,
    Project,
    ProjectType,
    TranslationJsResult,
    TranslationWasmResult,
    VersionInfo,
)
from kompile_core.telemetry import NoopTelemetrySink, TelemetrySink, safe_record
from kompile_core.translation import translate_js, translate_wasm
from kompile_core.version import get_version_info

if TYPE_CHECKING:
    from kompile_core.backends import CompletionEngine, JsIrBackend, JvmBackend, WasmBackend
    from kompile_core.environment import EnvironmentProvider

logger = structlog.get_logger(__name__)


class BackendKind(str, Enum):
    """Backend families a project can be routed to."""

    JVM = "jvm"
    JS_IR = "js-ir"
    WASM = "wasm"


ROUTES: dict[ProjectType, BackendKind] = {
    ProjectType.JAVA: BackendKind.JVM,
    ProjectType.JUNIT: BackendKind.JVM,
    ProjectType.CANVAS: BackendKind.JS_IR,
    ProjectType.JS: BackendKind.JS_IR,
    ProjectType.JS_IR: BackendKind.JS_IR,
    ProjectType.WASM: BackendKind.WASM,
    ProjectType.COMPOSE_WASM: BackendKind.WASM,
}
"""Routing table. Must cover every ProjectType member."""


def _check_routes(routes: dict[ProjectType, BackendKind]) -> None:
    missing = [t.value for t in ProjectType if t not in routes]
    if missing:
        raise RoutingError(", ".join(missing), internal_details=f"routes={sorted(routes)}")


_check_routes(ROUTES)


def route(project_type: ProjectType) -> BackendKind:
    """Return the backend family for ``project_type``.

    Raises:
        RoutingError: If the type has no route.
    """
    try:
        return ROUTES[project_type]
    except KeyError:
        raise RoutingError(project_type) from None


class ProjectExecutor:
    """Route projects to backends and shape their results.

    Attributes:
        jvm_backend: Bytecode compiler, program runner and test runner.
        js_backend: JavaScript IR translator.
        wasm_backend: WebAssembly translator.
        completion_engine: Code completion engine.
        environment_provider: Source of scoped compilation contexts.
        telemetry: Observer of top-level call results.

    Example:
        >>> executor = ProjectExecutor(
        ...     jvm_backend=jvm,
        ...     js_backend=js,
        ...     wasm_backend=wasm,
        ...     completion_engine=engine,
        ...     version=VersionInfo(version="2.0.0", stdlib_version="2.0.0"),
        ... )
        >>> executor.highlight(project)
        CompilerDiagnostics(map={'File.kt': []})
    """

    def __init__(
        self,
        jvm_backend: JvmBackend,
        js_backend: JsIrBackend,
        wasm_backend: WasmBackend,
        completion_engine: CompletionEngine,
        *,
        version: VersionInfo | None = None,
        environment_provider: EnvironmentProvider | None = None,
        telemetry: TelemetrySink | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            jvm_backend: Bytecode compiler, program runner and test runner.
            js_backend: JavaScript IR translator.
            wasm_backend: WebAssembly translator.
            completion_engine: Code completion engine.
            version: Backend version. Defaults to the process-wide VersionInfo.
            environment_provider: Context provider. Defaults to
                LocalEnvironmentProvider.
            telemetry: Telemetry sink. Defaults to a no-op sink.

        Raises:
            ValueError: If no version is given and none was set process-wide.
        """
        version = version or get_version_info()
        if version is None:
            raise ValueError("No VersionInfo given and none set process-wide")

        self.jvm_backend = jvm_backend
        self.js_backend = js_backend
        self.wasm_backend = wasm_backend
        self.completion_engine = completion_engine
        self.environment_provider = environment_provider or LocalEnvironmentProvider()
        self.telemetry = telemetry or NoopTelemetrySink()
        self._version = version

    # =========================================================================
    # Primary operations
    # =========================================================================

    def run(self, project: Project, add_byte_code: bool = False) -> ExecutionResult:
        """Compile and run the program.

        Args:
            project: Project to run.
            add_byte_code: Include disassembled bytecode in the result.

        Returns:
            ExecutionResult with program output and diagnostics.
        """
        result = self._run(project, add_byte_code)
        self._record(project, result)
        return result

    def test(self, project: Project, add_byte_code: bool = False) -> ExecutionResult:
        """Compile and run the project's tests.

        Args:
            project: Project to test.
            add_byte_code: Include disassembled bytecode in the result.

        Returns:
            ExecutionResult (a JunitExecutionResult from most backends).
        """
        result = self._test(project, add_byte_code)
        self._record(project, result)
        return result

    def convert_to_js_ir(self, project: Project) -> TranslationJsResult:
        """Translate to JavaScript through the IR backend."""
        result = self._convert_to_js_ir(project)
        self._record(project, result)
        return result

    def compile_to_jvm(self, project: Project) -> CompilationResult[JvmClasses]:
        """Compile to JVM class files, honoring ``project.add_classpath``."""
        result = self._compile_to_jvm(project)
        self._record(project, result)
        return result

    def convert_to_wasm(self, project: Project, debug_info: bool = False) -> TranslationWasmResult:
        """Translate to WebAssembly.

        Args:
            project: WASM-family project.
            debug_info: Keep the module's text form in the result.

        Returns:
            TranslationWasmResult with binary module and glue code.
        """
        result = self._convert_to_wasm(project, debug_info)
        self._record(project, result)
        return result

    def compile(self, project: Project, output_dir: Path | str) -> CompilationResponse:
        """Compile to JVM class files and persist the outcome.

        On success every class file is written under ``output_dir`` at its
        relative path. On failure all diagnostics are written to
        ``output_dir/compile.err``. Write failures propagate.

        Args:
            project: Project to compile.
            output_dir: Output directory, created if missing.

        Returns:
            CompilationResponse with ``success`` set if artifacts were written.
        """
        result = self.compile_to_jvm(project)
        log = logger.bind(output_dir=str(output_dir), conf_type=project.conf_type.value)

        if isinstance(result, Compiled):
            save_classes_to_directory(result.result.files, output_dir)
            log.info("compile_succeeded", artifacts=len(result.result.files))
            return CompilationResponse(success=True)

        save_errors_to_file(result.compiler_diagnostics, output_dir)
        log.info("compile_failed", errors=len(result.compiler_diagnostics.errors()))
        return CompilationResponse(success=False)

    # =========================================================================
    # Advisory operations
    # =========================================================================

    def complete(self, project: Project, line: int, character: int) -> list[Completion]:
        """Propose completions in the project's first file.

        Never raises: any failure, including an out-of-range position or a
        project without files, yields an empty list.

        Args:
            project: Project being edited. May contain malformed source.
            line: 0-based line.
            character: 0-based column.

        Returns:
            Completion proposals, possibly empty.
        """
        try:
            with self.environment_provider.environment() as context:
                files = materialize(project, context)
                if not files:
                    logger.debug("completion_skipped", reason="no files", project=str(project))
                    return []
                file = files[0]
                if not file.contains_position(line, character):
                    raise CompletionPositionError(file.name, line, character)
                return list(
                    self.completion_engine.complete(
                        file, line, character, project.conf_type, context
                    )
                )
        except Exception:
            logger.warning(
                "completion_failed",
                project=str(project),
                line=line,
                character=character,
                exc_info=True,
            )
            return []

    def highlight(self, project: Project) -> CompilerDiagnostics:
        """Collect diagnostics for the project's target without returning artifacts.

        Never raises and never reports telemetry: any failure yields empty
        diagnostics.
        """
        try:
            kind = route(project.conf_type)
            match kind:
                case BackendKind.JVM:
                    return self._compile_to_jvm(project).compiler_diagnostics
                case BackendKind.JS_IR:
                    return self._convert_to_js_ir(project).compiler_diagnostics
                case BackendKind.WASM:
                    return self._convert_to_wasm(project, debug_info=False).compiler_diagnostics
                case _:
                    assert_never(kind)
        except Exception:
            logger.warning("highlight_failed", project=str(project), exc_info=True)
            return CompilerDiagnostics.empty()

    def get_version(self) -> VersionInfo:
        """Return the backend version descriptor."""
        return self._version

    # =========================================================================
    # Dispatch
    # =========================================================================

    def _run(self, project: Project, add_byte_code: bool) -> ExecutionResult:
        self._expect(project, BackendKind.JVM)
        if not project.files:
            return ExecutionResult()
        result = self._in_environment(
            project,
            lambda files: self.jvm_backend.run(files, add_byte_code, project.args),
        )
        return normalize_execution(result, project)

    def _test(self, project: Project, add_byte_code: bool) -> ExecutionResult:
        self._expect(project, BackendKind.JVM)
        if not project.files:
            return JunitExecutionResult()
        result = self._in_environment(
            project,
            lambda files: self.jvm_backend.test(files, add_byte_code),
        )
        return normalize_execution(result, project)

    def _convert_to_js_ir(self, project: Project) -> TranslationJsResult:
        self._expect(project, BackendKind.JS_IR)
        if not project.files:
            return TranslationJsResult()
        result = self._in_environment(
            project,
            lambda files: translate_js(files, project.arguments, self.js_backend.translate),
        )
        return normalize_execution(result, project)

    def _compile_to_jvm(self, project: Project) -> CompilationResult[JvmClasses]:
        self._expect(project, BackendKind.JVM)
        if not project.files:
            return Compiled[JvmClasses](result=JvmClasses())
        result: CompilationResult[JvmClasses] = self._in_environment(
            project,
            lambda files: self.jvm_backend.compile(files, project.add_classpath),
        )
        return normalize_compilation(result, project)

    def _convert_to_wasm(self, project: Project, debug_info: bool) -> TranslationWasmResult:
        self._expect(project, BackendKind.WASM)
        if not project.files:
            return TranslationWasmResult()
        result = self._in_environment(
            project,
            lambda files: translate_wasm(
                files,
                project.arguments,
                debug_info,
                project.conf_type,
                self.wasm_backend.translate,
            ),
        )
        return normalize_execution(result, project)

    def _in_environment(self, project: Project, call: Callable[[list[Any]], Any]) -> Any:
        """Materialize ``project`` inside a fresh context and invoke one backend call."""
        with self.environment_provider.environment() as context:
            files = materialize(project, context)
            logger.debug(
                "backend_dispatched",
                conf_type=project.conf_type.value,
                files=len(files),
            )
            return call(files)

    @staticmethod
    def _expect(project: Project, kind: BackendKind) -> None:
        """Reject a project whose target does not route to ``kind``."""
        actual = route(project.conf_type)
        if actual is not kind:
            raise RoutingError(
                project.conf_type,
                internal_details=f"expected {kind.value} backend, type routes to {actual.value}",
            )

    def _record(self, project: Project, result: ExecutionResult | CompilationResult[Any]) -> None:
        safe_record(self.telemetry, result, project.conf_type, self._version.version)


