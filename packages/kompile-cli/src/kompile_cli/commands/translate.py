"""kompile translate command - Translate a project to JavaScript or WebAssembly."""

from __future__ import annotations

import click

from kompile_cli.errors import exit_code_for
from kompile_cli.output import error, print_model, program_output, success
from kompile_cli.session import (
    config_option,
    guard,
    json_option,
    load_executor,
    load_project,
    project_option,
    show_diagnostics,
)
from kompile_core.schemas import ExecutionResult, ExecutionStatus, TranslationWasmResult


@click.command()
@project_option
@config_option
@json_option
@click.option(
    "-t",
    "--target",
    "target",
    type=click.Choice(["js", "wasm"]),
    default=None,
    help="Translation target [default: derived from the project's confType]",
)
@click.option(
    "--debug-info",
    "debug_info",
    is_flag=True,
    default=False,
    help="Keep the WebAssembly text form (wasm only).",
)
def translate(
    project_path: str,
    config_path: str | None,
    as_json: bool,
    target: str | None,
    debug_info: bool,
) -> None:
    """Translate a js, js-ir, canvas, wasm or compose-wasm project.

    JavaScript is printed as-is. WebAssembly output is summarized unless
    --json is given, which prints the binary module base64-encoded.

    Examples:

        kompile translate --project web.yaml

        kompile translate --target wasm --debug-info --json
    """
    project = load_project(project_path)
    executor = load_executor(config_path)
    target = target or ("wasm" if project.conf_type.is_wasm else "js")

    result: ExecutionResult
    if target == "wasm":
        result = guard(lambda: executor.convert_to_wasm(project, debug_info=debug_info))
    else:
        result = guard(lambda: executor.convert_to_js_ir(project))

    if as_json:
        print_model(result)
    else:
        show_diagnostics(result.compiler_diagnostics)
        if result.exception is not None:
            error(f"Backend failure: {result.exception.full_name}: {result.exception.message}")
        elif result.status == ExecutionStatus.COMPILED:
            _show_translation(result)

    if result.status != ExecutionStatus.COMPILED:
        raise SystemExit(exit_code_for(result.status))


def _show_translation(result: ExecutionResult) -> None:
    if isinstance(result, TranslationWasmResult):
        success(f"Translated to WebAssembly ({len(result.wasm or b'')} bytes)")
        if result.wat:
            program_output(result.wat + "\n")
        return
    program_output((getattr(result, "js_code", None) or "") + "\n")
