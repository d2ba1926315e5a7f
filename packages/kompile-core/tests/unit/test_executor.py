"""Unit tests for the project executor.

Run with:
    pytest packages/kompile-core/tests/unit/test_executor.py -v
"""

from __future__ import annotations

from contextlib import contextmanager
from collections.abc import Iterator
from pathlib import Path

import pytest

from kompile_core.environment import CompilationContext, LocalEnvironmentProvider
from kompile_core.errors import RoutingError
from kompile_core.executor import ROUTES, BackendKind, ProjectExecutor, route
from kompile_core.schemas import (
    Compiled,
    CompilerDiagnostics,
    ErrorDescriptor,
    ExecutionStatus,
    JunitExecutionResult,
    NotCompiled,
    ProjectSeverity,
    ProjectType,
    VersionInfo,
)
from kompile_core.backends import WasmTarget
from kompile_core.version import set_version_info
from testing.fixtures import (
    CLASS_BYTES,
    FailingTelemetrySink,
    RecordingCompletionEngine,
    RecordingJsBackend,
    RecordingJvmBackend,
    RecordingTelemetrySink,
    RecordingWasmBackend,
    error_diagnostics,
    make_empty_project,
    make_project,
)


class TrackingEnvironmentProvider(LocalEnvironmentProvider):
    """Environment provider remembering every context it handed out."""

    def __init__(self) -> None:
        super().__init__()
        self.contexts: list[CompilationContext] = []

    @contextmanager
    def environment(self) -> Iterator[CompilationContext]:
        with super().environment() as context:
            self.contexts.append(context)
            yield context


def backend_call_counts(
    jvm: RecordingJvmBackend,
    js: RecordingJsBackend,
    wasm: RecordingWasmBackend,
) -> dict[str, int]:
    return {"jvm": jvm.call_count, "js": js.call_count, "wasm": wasm.call_count}


def executor_with_jvm(jvm_backend: RecordingJvmBackend, version: VersionInfo) -> ProjectExecutor:
    return ProjectExecutor(
        jvm_backend,
        RecordingJsBackend(),
        RecordingWasmBackend(),
        RecordingCompletionEngine(),
        version=version,
    )


class TestRouting:
    """Tests for the routing table."""

    @pytest.mark.requirement("routing")
    def test_every_project_type_is_routed(self) -> None:
        """The routing table covers the whole enumeration."""
        assert set(ROUTES) == set(ProjectType)

    @pytest.mark.requirement("routing")
    def test_every_backend_kind_is_reachable(self) -> None:
        """Highlight dispatch has one branch per backend kind, each in use."""
        assert set(ROUTES.values()) == set(BackendKind)

    @pytest.mark.requirement("routing")
    @pytest.mark.parametrize(
        ("project_type", "kind"),
        [
            (ProjectType.JAVA, BackendKind.JVM),
            (ProjectType.JUNIT, BackendKind.JVM),
            (ProjectType.CANVAS, BackendKind.JS_IR),
            (ProjectType.JS, BackendKind.JS_IR),
            (ProjectType.JS_IR, BackendKind.JS_IR),
            (ProjectType.WASM, BackendKind.WASM),
            (ProjectType.COMPOSE_WASM, BackendKind.WASM),
        ],
    )
    def test_route(self, project_type: ProjectType, kind: BackendKind) -> None:
        assert route(project_type) is kind

    @pytest.mark.requirement("routing")
    def test_run_rejects_non_jvm_project(self, executor: ProjectExecutor) -> None:
        """A JS project never reaches the JVM backend."""
        with pytest.raises(RoutingError):
            executor.run(make_project(ProjectType.JS))

    @pytest.mark.requirement("routing")
    def test_convert_to_wasm_rejects_js_project(self, executor: ProjectExecutor) -> None:
        with pytest.raises(RoutingError):
            executor.convert_to_wasm(make_project(ProjectType.JS_IR))


class TestExecutorConstruction:
    """Tests for executor wiring."""

    def test_requires_version(
        self,
        jvm_backend: RecordingJvmBackend,
        js_backend: RecordingJsBackend,
        wasm_backend: RecordingWasmBackend,
        completion_engine: RecordingCompletionEngine,
    ) -> None:
        """Without a version argument or process-wide version, construction fails."""
        with pytest.raises(ValueError, match="VersionInfo"):
            ProjectExecutor(jvm_backend, js_backend, wasm_backend, completion_engine)

    def test_uses_process_wide_version(
        self,
        jvm_backend: RecordingJvmBackend,
        js_backend: RecordingJsBackend,
        wasm_backend: RecordingWasmBackend,
        completion_engine: RecordingCompletionEngine,
    ) -> None:
        info = set_version_info(VersionInfo(version="9.9.9", stdlib_version="9.9.9"))
        executor = ProjectExecutor(jvm_backend, js_backend, wasm_backend, completion_engine)

        assert executor.get_version() == info


class TestRun:
    """Tests for run and test."""

    def test_run_forwards_arguments(
        self, executor: ProjectExecutor, jvm_backend: RecordingJvmBackend
    ) -> None:
        project = make_project(args="alpha  beta")
        result = executor.run(project, add_byte_code=True)

        assert result.status == ExecutionStatus.COMPILED
        assert result.text == "Hello, world!\n"
        assert result.jvm_byte_code is not None
        call = jvm_backend.calls[0]
        assert call.method == "run"
        assert call.kwargs == {"add_byte_code": True, "args": "alpha  beta"}
        assert call.file_names == ["File.kt"]

    def test_run_with_errors_is_not_compiled(self, version: VersionInfo) -> None:
        executor = ProjectExecutor(
            RecordingJvmBackend(diagnostics=error_diagnostics()),
            RecordingJsBackend(),
            RecordingWasmBackend(),
            RecordingCompletionEngine(),
            version=version,
        )
        result = executor.run(make_project())

        assert result.status == ExecutionStatus.NOT_COMPILED
        assert result.compiler_diagnostics.has_errors

    def test_test_uses_test_runner(
        self, executor: ProjectExecutor, jvm_backend: RecordingJvmBackend
    ) -> None:
        result = executor.test(make_project(ProjectType.JUNIT))

        assert isinstance(result, JunitExecutionResult)
        assert "AppTest" in result.test_results
        assert [c.method for c in jvm_backend.calls] == ["test"]

    def test_backend_exception_propagates_from_run(
        self, executor: ProjectExecutor, jvm_backend: RecordingJvmBackend
    ) -> None:
        """Primary operations add no containment of their own."""
        jvm_backend.raises = RuntimeError("compiler crashed")

        with pytest.raises(RuntimeError, match="compiler crashed"):
            executor.run(make_project())

    def test_foreign_diagnostic_keys_are_dropped(self, version: VersionInfo) -> None:
        """Diagnostics only reference files of the originating project."""
        diagnostics = CompilerDiagnostics(
            map={
                "Other.kt": [ErrorDescriptor(message="unused", severity=ProjectSeverity.WARNING)],
                "File.kt": [],
            }
        )
        executor = executor_with_jvm(RecordingJvmBackend(diagnostics=diagnostics), version)

        result = executor.run(make_project())

        assert list(result.compiler_diagnostics.map) == ["File.kt"]
        assert result.status == ExecutionStatus.COMPILED

    def test_foreign_error_fails_the_run(self, version: VersionInfo) -> None:
        """An ERROR keyed to an unknown file is kept and the run is not compiled."""
        backend = RecordingJvmBackend(diagnostics=error_diagnostics("<stdin>", "Expecting '}'"))
        executor = executor_with_jvm(backend, version)

        result = executor.run(make_project())

        assert result.status == ExecutionStatus.NOT_COMPILED
        assert [d.message for d in result.compiler_diagnostics.map["File.kt"]] == [
            "Expecting '}'"
        ]


class TestTranslation:
    """Tests for JS and WASM translation."""

    def test_js_arguments_split_on_whitespace(
        self, executor: ProjectExecutor, js_backend: RecordingJsBackend
    ) -> None:
        result = executor.convert_to_js_ir(make_project(ProjectType.JS_IR, args="-a  -b c"))

        assert result.js_code == "console.log('ok');"
        assert js_backend.calls[0].kwargs["arguments"] == ["-a", "-b", "c"]

    def test_js_backend_failure_becomes_internal_error(
        self, executor: ProjectExecutor, js_backend: RecordingJsBackend
    ) -> None:
        js_backend.raises = RuntimeError("translator crashed")
        result = executor.convert_to_js_ir(make_project(ProjectType.JS))

        assert result.status == ExecutionStatus.INTERNAL_ERROR
        assert result.exception is not None
        assert result.exception.message == "translator crashed"
        assert result.js_code is None

    def test_wasm_backend_failure_becomes_internal_error(
        self, executor: ProjectExecutor, wasm_backend: RecordingWasmBackend
    ) -> None:
        """Translator faults are shaped into the result; JVM faults propagate."""
        wasm_backend.raises = RuntimeError("translator crashed")
        result = executor.convert_to_wasm(make_project(ProjectType.WASM), debug_info=True)

        assert result.status == ExecutionStatus.INTERNAL_ERROR
        assert result.exception is not None
        assert result.wasm is None

    @pytest.mark.parametrize(
        ("project_type", "target"),
        [(ProjectType.WASM, WasmTarget.PLAIN), (ProjectType.COMPOSE_WASM, WasmTarget.COMPOSE)],
    )
    def test_wasm_target_variant(
        self,
        executor: ProjectExecutor,
        wasm_backend: RecordingWasmBackend,
        project_type: ProjectType,
        target: WasmTarget,
    ) -> None:
        executor.convert_to_wasm(make_project(project_type))

        assert wasm_backend.calls[0].kwargs["target"] is target

    def test_wasm_debug_info_controls_text_form(self, executor: ProjectExecutor) -> None:
        with_debug = executor.convert_to_wasm(make_project(ProjectType.WASM), debug_info=True)
        without_debug = executor.convert_to_wasm(make_project(ProjectType.WASM), debug_info=False)

        assert with_debug.wat == "(module)"
        assert without_debug.wat is None
        assert with_debug.wasm == without_debug.wasm == RecordingWasmBackend.WASM_BYTES
        assert with_debug.js_instantiated == "await instantiate();"


class TestCompileToJvm:
    """Tests for compile_to_jvm."""

    def test_honors_classpath_flag(
        self, executor: ProjectExecutor, jvm_backend: RecordingJvmBackend
    ) -> None:
        result = executor.compile_to_jvm(make_project(add_classpath=True))

        assert isinstance(result, Compiled)
        assert jvm_backend.calls[0].kwargs == {"add_classpath": True}

    def test_errors_yield_not_compiled(self, version: VersionInfo) -> None:
        executor = ProjectExecutor(
            RecordingJvmBackend(diagnostics=error_diagnostics()),
            RecordingJsBackend(),
            RecordingWasmBackend(),
            RecordingCompletionEngine(),
            version=version,
        )

        assert isinstance(executor.compile_to_jvm(make_project()), NotCompiled)


class TestSingleBackendPerCall:
    """Exactly one backend is invoked per call, chosen by target type."""

    @pytest.mark.parametrize("project_type", list(ProjectType))
    def test_highlight_invokes_one_backend(
        self,
        executor: ProjectExecutor,
        jvm_backend: RecordingJvmBackend,
        js_backend: RecordingJsBackend,
        wasm_backend: RecordingWasmBackend,
        project_type: ProjectType,
    ) -> None:
        executor.highlight(make_project(project_type))

        counts = backend_call_counts(jvm_backend, js_backend, wasm_backend)
        expected = {BackendKind.JVM: "jvm", BackendKind.JS_IR: "js", BackendKind.WASM: "wasm"}[
            route(project_type)
        ]
        assert counts[expected] == 1
        assert sum(counts.values()) == 1


class TestEnvironmentScope:
    """Every backend call runs inside a context released on every exit path."""

    def _executor(
        self,
        provider: TrackingEnvironmentProvider,
        jvm_backend: RecordingJvmBackend,
        version: VersionInfo,
    ) -> ProjectExecutor:
        return ProjectExecutor(
            jvm_backend,
            RecordingJsBackend(),
            RecordingWasmBackend(),
            RecordingCompletionEngine(),
            version=version,
            environment_provider=provider,
        )

    def test_files_bound_to_released_context(
        self, jvm_backend: RecordingJvmBackend, version: VersionInfo
    ) -> None:
        provider = TrackingEnvironmentProvider()
        executor = self._executor(provider, jvm_backend, version)

        executor.compile_to_jvm(make_project(files={"A.kt": "", "B.kt": ""}))

        assert len(provider.contexts) == 1
        context = provider.contexts[0]
        assert jvm_backend.calls[0].contexts == [context, context]
        assert context.closed
        assert not context.work_dir.exists()

    def test_context_released_when_backend_raises(
        self, jvm_backend: RecordingJvmBackend, version: VersionInfo
    ) -> None:
        provider = TrackingEnvironmentProvider()
        executor = self._executor(provider, jvm_backend, version)
        jvm_backend.raises = RuntimeError("boom")

        with pytest.raises(RuntimeError):
            executor.run(make_project())

        assert provider.contexts[0].closed

    def test_each_call_gets_a_fresh_context(
        self, jvm_backend: RecordingJvmBackend, version: VersionInfo
    ) -> None:
        provider = TrackingEnvironmentProvider()
        executor = self._executor(provider, jvm_backend, version)

        executor.run(make_project())
        executor.run(make_project())

        first, second = provider.contexts
        assert first.context_id != second.context_id


class TestComplete:
    """Tests for complete."""

    def test_completes_first_file(
        self, executor: ProjectExecutor, completion_engine: RecordingCompletionEngine
    ) -> None:
        project = make_project(files={"Main.kt": "fun main() {\n    pri\n}", "Util.kt": ""})
        completions = executor.complete(project, line=1, character=7)

        assert [c.text for c in completions] == ["println()"]
        call = completion_engine.calls[0]
        assert call.file_names == ["Main.kt"]
        assert call.kwargs == {"line": 1, "character": 7, "project_type": ProjectType.JAVA}

    @pytest.mark.parametrize(("line", "character"), [(99, 0), (0, 500), (-1, 0)])
    def test_out_of_range_position_yields_empty(
        self,
        executor: ProjectExecutor,
        completion_engine: RecordingCompletionEngine,
        line: int,
        character: int,
    ) -> None:
        assert executor.complete(make_project(), line, character) == []
        assert completion_engine.call_count == 0

    def test_zero_files_yields_empty(self, executor: ProjectExecutor) -> None:
        assert executor.complete(make_empty_project(), 0, 0) == []

    def test_engine_failure_yields_empty(
        self,
        executor: ProjectExecutor,
        completion_engine: RecordingCompletionEngine,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        completion_engine.raises = RuntimeError("engine crashed")

        assert executor.complete(make_project(), 0, 0) == []
        assert "completion_failed" in capsys.readouterr().out


class TestHighlight:
    """Tests for highlight."""

    def test_returns_diagnostics_only(self, version: VersionInfo) -> None:
        executor = ProjectExecutor(
            RecordingJvmBackend(diagnostics=error_diagnostics()),
            RecordingJsBackend(),
            RecordingWasmBackend(),
            RecordingCompletionEngine(),
            version=version,
        )
        diagnostics = executor.highlight(make_project())

        assert isinstance(diagnostics, CompilerDiagnostics)
        assert diagnostics.errors()[0].message == "Unresolved reference: foo"

    @pytest.mark.parametrize("project_type", [ProjectType.JAVA, ProjectType.JS, ProjectType.WASM])
    def test_throwing_backend_yields_empty_map(
        self,
        executor: ProjectExecutor,
        jvm_backend: RecordingJvmBackend,
        js_backend: RecordingJsBackend,
        wasm_backend: RecordingWasmBackend,
        project_type: ProjectType,
    ) -> None:
        for backend in (jvm_backend, js_backend, wasm_backend):
            backend.raises = RuntimeError("backend crashed")

        assert executor.highlight(make_project(project_type)) == CompilerDiagnostics.empty()

    def test_zero_files_yields_empty_map(self, executor: ProjectExecutor) -> None:
        assert executor.highlight(make_empty_project()).map == {}

    def test_foreign_error_is_reported(self, version: VersionInfo) -> None:
        backend = RecordingJvmBackend(diagnostics=error_diagnostics("<stdin>"))

        diagnostics = executor_with_jvm(backend, version).highlight(make_project())

        assert diagnostics.has_errors
        assert list(diagnostics.map) == ["File.kt"]


class TestCompile:
    """Tests for compile with persistence."""

    def test_success_writes_artifacts(self, executor: ProjectExecutor, tmp_path: Path) -> None:
        output_dir = tmp_path / "out"
        response = executor.compile(make_project(), output_dir)

        assert response.success is True
        class_file = output_dir / "app" / "FileKt.class"
        assert class_file.read_bytes() == CLASS_BYTES + b"File.kt"
        assert not (output_dir / "compile.err").exists()

    def test_round_trip_matches_payload(
        self, executor: ProjectExecutor, tmp_path: Path
    ) -> None:
        project = make_project(files={"Main.kt": "", "util.kt": ""})
        compiled = executor.compile_to_jvm(project)
        assert isinstance(compiled, Compiled)

        executor.compile(project, tmp_path)

        for relative_path, content in compiled.result.files.items():
            assert (tmp_path / relative_path).read_bytes() == content

    def test_failure_writes_error_report(self, version: VersionInfo, tmp_path: Path) -> None:
        executor = ProjectExecutor(
            RecordingJvmBackend(diagnostics=error_diagnostics("File.kt", "msg")),
            RecordingJsBackend(),
            RecordingWasmBackend(),
            RecordingCompletionEngine(),
            version=version,
        )
        response = executor.compile(make_project(), tmp_path)

        assert response.success is False
        assert (tmp_path / "compile.err").read_text() == "File.kt:5:10: ERROR: msg"

    def test_foreign_error_writes_error_report(
        self, version: VersionInfo, tmp_path: Path
    ) -> None:
        backend = RecordingJvmBackend(diagnostics=error_diagnostics("<stdin>", "msg"))

        response = executor_with_jvm(backend, version).compile(make_project(), tmp_path)

        assert response.success is False
        assert (tmp_path / "compile.err").read_text() == "File.kt:5:10: ERROR: msg"

    def test_compile_is_idempotent(self, executor: ProjectExecutor, tmp_path: Path) -> None:
        project = make_project(files={"Main.kt": "", "Other.kt": ""})

        executor.compile(project, tmp_path)
        first = {p: p.read_bytes() for p in tmp_path.rglob("*") if p.is_file()}
        executor.compile(project, tmp_path)
        second = {p: p.read_bytes() for p in tmp_path.rglob("*") if p.is_file()}

        assert first == second

    def test_write_failure_propagates(self, executor: ProjectExecutor, tmp_path: Path) -> None:
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("file in the way")

        with pytest.raises(OSError):
            executor.compile(make_project(), blocker)

    def test_zero_files_compiles_to_nothing(
        self, executor: ProjectExecutor, jvm_backend: RecordingJvmBackend, tmp_path: Path
    ) -> None:
        response = executor.compile(make_empty_project(), tmp_path / "out")

        assert response.success is True
        assert jvm_backend.call_count == 0
        assert list((tmp_path / "out").iterdir()) == []


class TestTelemetry:
    """Telemetry fires once per top-level call, never for advisory calls."""

    def test_fires_once_per_primary_call(
        self, executor: ProjectExecutor, telemetry: RecordingTelemetrySink, tmp_path: Path
    ) -> None:
        executor.run(make_project())
        executor.test(make_project(ProjectType.JUNIT))
        executor.convert_to_js_ir(make_project(ProjectType.JS_IR))
        executor.convert_to_wasm(make_project(ProjectType.COMPOSE_WASM))
        executor.compile_to_jvm(make_project())
        executor.compile(make_project(), tmp_path)

        assert len(telemetry.records) == 6
        assert [r[1] for r in telemetry.records] == [
            ProjectType.JAVA,
            ProjectType.JUNIT,
            ProjectType.JS_IR,
            ProjectType.COMPOSE_WASM,
            ProjectType.JAVA,
            ProjectType.JAVA,
        ]
        assert {r[2] for r in telemetry.records} == {"2.1.0"}

    def test_not_fired_for_advisory_calls(
        self, executor: ProjectExecutor, telemetry: RecordingTelemetrySink
    ) -> None:
        executor.complete(make_project(), 0, 0)
        for project_type in ProjectType:
            executor.highlight(make_project(project_type))

        assert telemetry.records == []

    def test_failing_sink_is_swallowed(
        self,
        jvm_backend: RecordingJvmBackend,
        version: VersionInfo,
    ) -> None:
        sink = FailingTelemetrySink()
        executor = ProjectExecutor(
            jvm_backend,
            RecordingJsBackend(),
            RecordingWasmBackend(),
            RecordingCompletionEngine(),
            version=version,
            telemetry=sink,
        )

        result = executor.run(make_project())

        assert result.status == ExecutionStatus.COMPILED
        assert sink.attempts == 1

    def test_absent_sink_is_noop(
        self, jvm_backend: RecordingJvmBackend, version: VersionInfo
    ) -> None:
        executor = ProjectExecutor(
            jvm_backend,
            RecordingJsBackend(),
            RecordingWasmBackend(),
            RecordingCompletionEngine(),
            version=version,
        )

        assert executor.run(make_project()).succeeded
