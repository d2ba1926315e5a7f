"""Result models for kompile.

Every backend returns one of these shapes, whatever its target:
- CompilationResult: Compiled(result, diagnostics) | NotCompiled(diagnostics)
- ExecutionResult: Program/test output with a derived ExecutionStatus
- TranslationJsResult, TranslationWasmResult: Translation payloads
- JvmClasses, WasmTranslationOutput: Backend payloads
- CompilationResponse: Outcome of a persisted compile
"""

from __future__ import annotations

from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from kompile_core.schemas.diagnostics import CompilerDiagnostics, ExceptionDescriptor

T = TypeVar("T")

_MODEL_CONFIG = ConfigDict(
    frozen=True,
    extra="forbid",
    alias_generator=to_camel,
    populate_by_name=True,
    ser_json_bytes="base64",
)


class ExecutionStatus(str, Enum):
    """Outcome variant of an execution or translation.

    Attributes:
        COMPILED: Backend produced its payload with no ERROR diagnostics.
        NOT_COMPILED: At least one ERROR diagnostic was reported.
        INTERNAL_ERROR: The backend faulted without a diagnosable cause.
    """

    COMPILED = "compiled"
    NOT_COMPILED = "not_compiled"
    INTERNAL_ERROR = "internal_error"


# =============================================================================
# COMPILATION RESULT
# =============================================================================


class CompilationResult(BaseModel, Generic[T]):
    """Base of the Compiled / NotCompiled variant."""

    model_config = _MODEL_CONFIG

    compiler_diagnostics: CompilerDiagnostics = Field(default_factory=CompilerDiagnostics.empty)

    @property
    def compiled(self) -> bool:
        """Check if this is the Compiled variant."""
        return isinstance(self, Compiled)


class Compiled(CompilationResult[T], Generic[T]):
    """Backend produced a payload.

    Attributes:
        result: Backend payload (class files, JS text, WASM module).
    """

    result: T


class NotCompiled(CompilationResult[T], Generic[T]):
    """Backend reported diagnostics and produced no payload."""


class JvmClasses(BaseModel):
    """Compiled JVM classes.

    Attributes:
        files: Relative path (e.g., "pkg/MainKt.class") -> class bytes.
        main_class: Fully qualified entry point, if one was found.
    """

    model_config = _MODEL_CONFIG

    files: dict[str, bytes] = Field(default_factory=dict)
    main_class: str | None = None


class WasmTranslationOutput(BaseModel):
    """Payload produced by a WASM backend.

    Attributes:
        js_code: JS glue module.
        js_instantiated: JS module that instantiates the binary.
        wasm: Binary module.
        wat: Text form of the module (only meaningful with debug info).
    """

    model_config = _MODEL_CONFIG

    js_code: str
    js_instantiated: str
    wasm: bytes
    wat: str | None = None


# =============================================================================
# EXECUTION RESULTS
# =============================================================================


class ExecutionResult(BaseModel):
    """Result of running, testing or translating a project.

    Attributes:
        compiler_diagnostics: Diagnostics per file.
        text: Program output.
        exception: Internal failure raised by the backend, if any.
        jvm_byte_code: Disassembled bytecode, when it was requested.

    Example:
        >>> result = ExecutionResult(text="Hello")
        >>> result.status
        <ExecutionStatus.COMPILED: 'compiled'>
    """

    model_config = _MODEL_CONFIG

    compiler_diagnostics: CompilerDiagnostics = Field(default_factory=CompilerDiagnostics.empty)
    text: str = ""
    exception: ExceptionDescriptor | None = None
    jvm_byte_code: str | None = None

    @property
    def status(self) -> ExecutionStatus:
        """Outcome variant derived from diagnostics and exception.

        ERROR diagnostics always win: a result carrying one is never reported
        as compiled.
        """
        if self.compiler_diagnostics.has_errors:
            return ExecutionStatus.NOT_COMPILED
        if self.exception is not None:
            return ExecutionStatus.INTERNAL_ERROR
        return ExecutionStatus.COMPILED

    @property
    def succeeded(self) -> bool:
        return self.status == ExecutionStatus.COMPILED


class TestStatus(str, Enum):
    """Outcome of a single test."""

    __test__ = False

    OK = "OK"
    FAIL = "FAIL"
    ERROR = "ERROR"


class TestDescription(BaseModel):
    """A single test outcome reported by the test runner."""

    __test__ = False

    model_config = _MODEL_CONFIG

    class_name: str
    method_name: str
    status: TestStatus
    output: str = ""
    exception: ExceptionDescriptor | None = None
    execution_time: int = Field(default=0, ge=0, description="Duration in milliseconds")


class JunitExecutionResult(ExecutionResult):
    """Execution result of a test run.

    Attributes:
        test_results: Test class name -> outcomes.
    """

    test_results: dict[str, list[TestDescription]] = Field(default_factory=dict)


class TranslationJsResult(ExecutionResult):
    """Result of a JavaScript translation.

    Attributes:
        js_code: Transpiled JavaScript, absent unless compiled.
    """

    js_code: str | None = None


class TranslationWasmResult(ExecutionResult):
    """Result of a WebAssembly translation: binary module plus glue code.

    Attributes:
        js_code: JS glue module.
        js_instantiated: JS instantiation module.
        wasm: Binary module.
        wat: Text form, populated only when debug info was requested.
    """

    js_code: str | None = None
    js_instantiated: str | None = None
    wasm: bytes | None = None
    wat: str | None = None


class CompilationResponse(BaseModel):
    """Outcome of a persisted compile.

    Attributes:
        success: True if artifacts were produced and written.
    """

    model_config = _MODEL_CONFIG

    success: bool
