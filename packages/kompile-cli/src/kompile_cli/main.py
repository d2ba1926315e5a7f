"""CLI entry point for kompile.

The ``kompile`` group resolves subcommands lazily, so ``kompile --help``
does not import the executor or any configured backend.
"""

from __future__ import annotations

import importlib
from typing import Any

import click
import rich_click as rclick

from kompile_cli import __version__
from kompile_cli.output import set_no_color

rclick.rich_click.TEXT_MARKUP = "markdown"
rclick.rich_click.SHOW_ARGUMENTS = True
rclick.rich_click.GROUP_ARGUMENTS_OPTIONS = True


class LazyGroup(rclick.RichGroup):
    """Click group that imports a subcommand only when it is looked up.

    Attributes:
        lazy_subcommands: Command name -> "module.attribute" path.
    """

    def __init__(
        self,
        *args: Any,
        lazy_subcommands: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.lazy_subcommands: dict[str, str] = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        """Return registered and lazy command names, sorted."""
        commands = set(super().list_commands(ctx))
        commands.update(self.lazy_subcommands)
        return sorted(commands)

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Return a registered command, importing a lazy one on first use."""
        cmd = super().get_command(ctx, cmd_name)  # type: ignore[arg-type]
        if cmd is not None:
            return cmd
        if cmd_name not in self.lazy_subcommands:
            return None

        module_name, attr_name = self.lazy_subcommands[cmd_name].rsplit(".", 1)
        mod = importlib.import_module(module_name)
        return getattr(mod, attr_name)  # type: ignore[no-any-return]


LAZY_COMMANDS = {
    "run": "kompile_cli.commands.run.run",
    "test": "kompile_cli.commands.junit.run_tests",
    "compile": "kompile_cli.commands.compile.compile_cmd",
    "translate": "kompile_cli.commands.translate.translate",
    "complete": "kompile_cli.commands.complete.complete",
    "highlight": "kompile_cli.commands.highlight.highlight",
    "version": "kompile_cli.commands.version.version",
}


@click.command(cls=LazyGroup, lazy_subcommands=LAZY_COMMANDS)
@click.version_option(version=__version__, prog_name="kompile")
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output.",
    is_eager=True,
    expose_value=False,
    callback=lambda ctx, param, value: set_no_color(value) if value else None,
)
def cli() -> None:
    """kompile - compile, run and translate projects for the JVM, JavaScript and WebAssembly.

    Backends are configured in kompile.yaml.

    **Getting Started:**

    - `kompile run` - Compile and run ./project.yaml
    - `kompile compile --output out/` - Write class files
    - `kompile translate --target wasm` - Translate to WebAssembly
    - `kompile highlight` - Show diagnostics
    """


if __name__ == "__main__":
    cli()
