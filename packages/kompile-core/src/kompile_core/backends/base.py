"""Backend interfaces.

Backends are external collaborators: the actual compilers, translators and
the completion engine. The executor only relies on these narrow protocols.
Every backend receives materialized SourceHandles and reports diagnostics
in the uniform CompilerDiagnostics model.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from kompile_core.environment import CompilationContext
    from kompile_core.files import SourceHandle
    from kompile_core.schemas import (
        CompilationResult,
        Completion,
        ExecutionResult,
        JvmClasses,
        ProjectType,
        WasmTranslationOutput,
    )


class WasmTarget(str, Enum):
    """Runtime variant for WASM translation.

    Attributes:
        PLAIN: Standalone WebAssembly module.
        COMPOSE: Module linked against the Compose UI framework.
    """

    PLAIN = "plain"
    COMPOSE = "compose"


@runtime_checkable
class JvmBackend(Protocol):
    """Bytecode compiler, program runner and test runner."""

    def run(
        self,
        files: Sequence[SourceHandle],
        add_byte_code: bool,
        args: str,
    ) -> ExecutionResult:
        """Compile and run the program, capturing its output."""
        ...

    def test(self, files: Sequence[SourceHandle], add_byte_code: bool) -> ExecutionResult:
        """Compile and run the tests."""
        ...

    def compile(
        self,
        files: Sequence[SourceHandle],
        add_classpath: bool,
    ) -> CompilationResult[JvmClasses]:
        """Compile to class files without running."""
        ...


@runtime_checkable
class JsIrBackend(Protocol):
    """Translator through the JavaScript intermediate representation."""

    def translate(
        self,
        files: Sequence[SourceHandle],
        arguments: list[str],
    ) -> CompilationResult[str]:
        """Translate to JavaScript text."""
        ...


@runtime_checkable
class WasmBackend(Protocol):
    """Translator to WebAssembly."""

    def translate(
        self,
        files: Sequence[SourceHandle],
        arguments: list[str],
        target: WasmTarget,
        debug_info: bool,
    ) -> CompilationResult[WasmTranslationOutput]:
        """Translate to a binary module plus JS glue code."""
        ...


@runtime_checkable
class CompletionEngine(Protocol):
    """Code completion engine."""

    def complete(
        self,
        file: SourceHandle,
        line: int,
        character: int,
        project_type: ProjectType,
        context: CompilationContext,
    ) -> list[Completion]:
        """Propose completions at a 0-based position of ``file``."""
        ...
