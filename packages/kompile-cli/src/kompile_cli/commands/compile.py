"""kompile compile command - Write class files for a JVM project."""

from __future__ import annotations

from pathlib import Path

import click

from kompile_cli.errors import EXIT_SYSTEM_ERROR, EXIT_USER_ERROR, CLIError
from kompile_cli.output import error, success
from kompile_cli.session import config_option, load_executor, load_project, project_option
from kompile_core.errors import KompileError, PersistenceError
from kompile_core.persistence import ERROR_FILE_NAME


@click.command("compile")
@project_option
@config_option
@click.option(
    "-o",
    "--output",
    "output_path",
    type=click.Path(),
    default="build/classes",
    help="Output directory [default: build/classes]",
)
def compile_cmd(project_path: str, config_path: str | None, output_path: str) -> None:
    """Compile a java project to class files.

    On success every class file is written under the output directory. On
    failure the diagnostics are written to compile.err in the same
    directory and the command exits with 1.

    Examples:

        kompile compile

        kompile compile --project app.yaml --output out/
    """
    project = load_project(project_path)
    executor = load_executor(config_path)
    output = Path(output_path)

    try:
        response = executor.compile(project, output)
    except PermissionError:
        raise CLIError(f"Cannot write to: {output_path}", exit_code=EXIT_SYSTEM_ERROR) from None
    except PersistenceError as e:
        raise CLIError(e.user_message, exit_code=EXIT_SYSTEM_ERROR) from None
    except KompileError as e:
        raise CLIError(e.user_message) from None
    except OSError as e:
        raise CLIError(f"Cannot write to {output_path}: {e}", exit_code=EXIT_SYSTEM_ERROR) from None

    if response.success:
        success(f"Compiled to {output}")
        return

    error(f"Compilation failed, see {output / ERROR_FILE_NAME}")
    raise SystemExit(EXIT_USER_ERROR)
