"""kompile version command - Show the configured backend version."""

from __future__ import annotations

import click

from kompile_cli.output import info, print_model
from kompile_cli.session import config_option, json_option, load_executor


@click.command()
@config_option
@json_option
def version(config_path: str | None, as_json: bool) -> None:
    """Show the compiler and standard library versions from kompile.yaml."""
    version_info = load_executor(config_path).get_version()
    if as_json:
        print_model(version_info)
    else:
        info(f"compiler {version_info.version}, stdlib {version_info.stdlib_version}")
