"""Translation result shaping.

The JS and WASM backends return a plain CompilationResult. These helpers
run a translation routine, passed in as a function value, and shape its
outcome into the caller-facing translation result.

This is the translator side of a translate call, not executor containment.
A translation routine that raises produces a result carrying an
ExceptionDescriptor (INTERNAL_ERROR status), the same value a translator
reports for its own faults. The executor adds nothing on top: JVM backend
faults, which have no such shaping, propagate to the caller.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

import structlog

from kompile_core.backends import WasmTarget
from kompile_core.schemas import (
    CompilationResult,
    Compiled,
    ExceptionDescriptor,
    ProjectType,
    TranslationJsResult,
    TranslationWasmResult,
    WasmTranslationOutput,
)

if TYPE_CHECKING:
    from kompile_core.files import SourceHandle

logger = structlog.get_logger(__name__)

JsConverter = Callable[[Sequence["SourceHandle"], list[str]], CompilationResult[str]]
"""Translation routine for JavaScript: (files, arguments) -> result."""

WasmConverter = Callable[
    [Sequence["SourceHandle"], list[str], WasmTarget, bool],
    CompilationResult[WasmTranslationOutput],
]
"""Translation routine for WASM: (files, arguments, target, debug_info) -> result."""


def wasm_target_for(project_type: ProjectType) -> WasmTarget:
    """Select the WASM runtime variant for a WASM-family project type.

    Raises:
        ValueError: If ``project_type`` is not a WASM target.
    """
    if project_type == ProjectType.WASM:
        return WasmTarget.PLAIN
    if project_type == ProjectType.COMPOSE_WASM:
        return WasmTarget.COMPOSE
    raise ValueError(f"Not a WASM project type: {project_type.value}")


def translate_js(
    files: Sequence[SourceHandle],
    arguments: list[str],
    converter: JsConverter,
) -> TranslationJsResult:
    """Run a JavaScript translation routine and shape its result.

    Args:
        files: Materialized sources.
        arguments: Translator arguments.
        converter: Translation routine to invoke.

    Returns:
        TranslationJsResult with ``js_code`` set only when compiled.
    """
    try:
        result = converter(files, arguments)
    except Exception as e:
        logger.error("js_translation_failed", error=str(e), exc_info=True)
        return TranslationJsResult(exception=ExceptionDescriptor.from_exception(e))

    if isinstance(result, Compiled):
        return TranslationJsResult(
            js_code=result.result,
            compiler_diagnostics=result.compiler_diagnostics,
        )
    return TranslationJsResult(compiler_diagnostics=result.compiler_diagnostics)


def translate_wasm(
    files: Sequence[SourceHandle],
    arguments: list[str],
    debug_info: bool,
    project_type: ProjectType,
    converter: WasmConverter,
) -> TranslationWasmResult:
    """Run a WASM translation routine and shape its result.

    Args:
        files: Materialized sources.
        arguments: Translator arguments.
        debug_info: Request debug output. Only affects the payload shape:
            the text form (``wat``) is kept only when True.
        project_type: WASM-family project type selecting the runtime variant.
        converter: Translation routine to invoke.

    Returns:
        TranslationWasmResult with glue code and binary set only when compiled.
    """
    target = wasm_target_for(project_type)
    try:
        result = converter(files, arguments, target, debug_info)
    except Exception as e:
        logger.error(
            "wasm_translation_failed",
            error=str(e),
            target=target.value,
            exc_info=True,
        )
        return TranslationWasmResult(exception=ExceptionDescriptor.from_exception(e))

    if isinstance(result, Compiled):
        output: WasmTranslationOutput = result.result
        return TranslationWasmResult(
            js_code=output.js_code,
            js_instantiated=output.js_instantiated,
            wasm=output.wasm,
            wat=output.wat if debug_info else None,
            compiler_diagnostics=result.compiler_diagnostics,
        )
    return TranslationWasmResult(compiler_diagnostics=result.compiler_diagnostics)
