"""kompile highlight command - Report diagnostics without producing artifacts."""

from __future__ import annotations

import click

from kompile_cli.output import print_model, success
from kompile_cli.session import (
    config_option,
    json_option,
    load_executor,
    load_project,
    project_option,
    show_diagnostics,
)


@click.command()
@project_option
@config_option
@json_option
def highlight(project_path: str, config_path: str | None, as_json: bool) -> None:
    """Check a project and print its diagnostics.

    Always exits with 0: diagnostics are advisory.

    Examples:

        kompile highlight --project app.yaml --json
    """
    project = load_project(project_path)
    executor = load_executor(config_path)
    diagnostics = executor.highlight(project)

    if as_json:
        print_model(diagnostics)
    elif diagnostics:
        show_diagnostics(diagnostics)
    else:
        success("No diagnostics")
