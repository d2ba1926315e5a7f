"""kompile run command - Compile and run a JVM project."""

from __future__ import annotations

import click

from kompile_cli.errors import exit_code_for
from kompile_cli.output import error, print_model, program_output
from kompile_cli.session import (
    config_option,
    guard,
    json_option,
    load_executor,
    load_project,
    project_option,
    show_diagnostics,
)
from kompile_core.schemas import ExecutionStatus


@click.command()
@project_option
@config_option
@json_option
@click.option(
    "--byte-code",
    "byte_code",
    is_flag=True,
    default=False,
    help="Include disassembled bytecode in the result.",
)
def run(project_path: str, config_path: str | None, as_json: bool, byte_code: bool) -> None:
    """Compile and run a java project.

    Program output goes to stdout. Diagnostics are printed one per line.
    The exit code is 1 if the project does not compile, 2 if the backend
    failed.

    Examples:

        kompile run

        kompile run --project hello.yaml --byte-code
    """
    project = load_project(project_path)
    executor = load_executor(config_path)
    result = guard(lambda: executor.run(project, add_byte_code=byte_code))

    if as_json:
        print_model(result)
    else:
        show_diagnostics(result.compiler_diagnostics)
        if result.exception is not None:
            error(f"Backend failure: {result.exception.full_name}: {result.exception.message}")
        program_output(result.text)
        if result.jvm_byte_code:
            program_output(result.jvm_byte_code)

    if result.status != ExecutionStatus.COMPILED:
        raise SystemExit(exit_code_for(result.status))
