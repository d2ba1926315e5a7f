"""kompile test command - Compile and run a project's JUnit tests."""

from __future__ import annotations

import click
from rich.markup import escape

from kompile_cli.errors import EXIT_USER_ERROR, exit_code_for
from kompile_cli.output import error, print_model, success
from kompile_cli.session import (
    config_option,
    guard,
    json_option,
    load_executor,
    load_project,
    project_option,
    show_diagnostics,
)
from kompile_core.schemas import ExecutionStatus, JunitExecutionResult, TestStatus


@click.command("test")
@project_option
@config_option
@json_option
def run_tests(project_path: str, config_path: str | None, as_json: bool) -> None:
    """Compile and run a junit project's tests.

    Prints one line per test. Exits with 1 if the project does not compile
    or any test fails.

    Examples:

        kompile test --project tests.yaml
    """
    project = load_project(project_path)
    executor = load_executor(config_path)
    result = guard(lambda: executor.test(project))

    if result.status != ExecutionStatus.COMPILED:
        if as_json:
            print_model(result)
        else:
            show_diagnostics(result.compiler_diagnostics)
        raise SystemExit(exit_code_for(result.status))

    outcomes = (
        [t for tests in result.test_results.values() for t in tests]
        if isinstance(result, JunitExecutionResult)
        else []
    )
    failed = [t for t in outcomes if t.status != TestStatus.OK]

    if as_json:
        print_model(result)
    else:
        for test in outcomes:
            name = escape(f"{test.class_name}.{test.method_name}")
            if test.status == TestStatus.OK:
                success(name)
            else:
                error(f"{name}: {test.status.value}")

    if failed:
        raise SystemExit(EXIT_USER_ERROR)
