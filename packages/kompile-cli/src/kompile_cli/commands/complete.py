"""kompile complete command - Propose completions at a position."""

from __future__ import annotations

import click

from kompile_cli.output import print_model
from kompile_cli.session import config_option, load_executor, load_project, project_option


@click.command()
@project_option
@config_option
@click.option("-l", "--line", type=int, required=True, help="0-based line")
@click.option("--ch", "character", type=int, required=True, help="0-based column")
def complete(project_path: str, config_path: str | None, line: int, character: int) -> None:
    """Print completion proposals for the project's first file as JSON.

    An out-of-range position or a failing completion engine prints an
    empty list.

    Examples:

        kompile complete --line 1 --ch 7
    """
    project = load_project(project_path)
    executor = load_executor(config_path)
    print_model(executor.complete(project, line, character))
