"""Rich console output for kompile-cli.

Status lines (success, error, warning), plain output and JSON. Honors the
NO_COLOR environment variable and the --no-color flag.
"""

from __future__ import annotations

import json
import os
from typing import Any

from pydantic import BaseModel
from rich.console import Console

# Rich respects NO_COLOR on its own; the flag lets --no-color force it too
_force_no_color = os.environ.get("NO_COLOR") is not None


def create_console(no_color: bool = False) -> Console:
    """Create a Console honoring ``no_color`` and NO_COLOR."""
    disabled = no_color or _force_no_color
    return Console(force_terminal=False if disabled else None, no_color=disabled)


console = create_console()


def success(message: str, **kwargs: Any) -> None:
    """Print a success line with a green check mark.

    Example:
        >>> success("Compiled to build/classes")
        ✓ Compiled to build/classes
    """
    console.print(f"[green]✓[/green] {message}", **kwargs)


def error(message: str, **kwargs: Any) -> None:
    """Print an error line with a red cross.

    Example:
        >>> error("File.kt:5:10: ERROR: Unresolved reference: foo")
        ✗ File.kt:5:10: ERROR: Unresolved reference: foo
    """
    console.print(f"[red]✗[/red] {message}", **kwargs)


def warning(message: str, **kwargs: Any) -> None:
    """Print a warning line with a yellow triangle."""
    console.print(f"[yellow]⚠[/yellow] {message}", **kwargs)


def info(message: str, **kwargs: Any) -> None:
    """Print a plain line."""
    console.print(message, **kwargs)


def program_output(text: str) -> None:
    """Print program output verbatim, without markup or highlighting."""
    console.print(text, markup=False, highlight=False, end="")


def print_json(data: Any, **kwargs: Any) -> None:
    """Print JSON data with syntax highlighting.

    Args:
        data: JSON-serializable value.
        **kwargs: Additional arguments passed to console.print_json().
    """
    console.print_json(json.dumps(data), **kwargs)


def print_model(model: BaseModel | list[BaseModel]) -> None:
    """Print one or more result models as JSON using their wire keys."""
    if isinstance(model, list):
        print_json([m.model_dump(mode="json", by_alias=True) for m in model])
    else:
        print_json(model.model_dump(mode="json", by_alias=True))


def set_no_color(no_color: bool) -> None:
    """Replace the module console with one that has colors enabled or disabled."""
    global console
    console = create_console(no_color=no_color)
