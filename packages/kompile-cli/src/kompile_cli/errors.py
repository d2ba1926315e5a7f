"""CLI error handling for kompile-cli.

Wraps kompile-core exceptions into user-facing messages with exit codes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import click
from pydantic import ValidationError as PydanticValidationError
from rich.markup import escape

from kompile_cli.output import error
from kompile_core.schemas import ExecutionStatus

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails


# Exit codes
EXIT_SUCCESS = 0
EXIT_USER_ERROR = 1  # Invalid input, project does not compile
EXIT_SYSTEM_ERROR = 2  # Missing file, write failure, backend fault

_STATUS_EXIT_CODES = {
    ExecutionStatus.COMPILED: EXIT_SUCCESS,
    ExecutionStatus.NOT_COMPILED: EXIT_USER_ERROR,
    ExecutionStatus.INTERNAL_ERROR: EXIT_SYSTEM_ERROR,
}


class CLIError(click.ClickException):
    """CLI exception carrying an exit code.

    Attributes:
        message: User-facing error message.
        exit_code: Process exit code.
    """

    def __init__(self, message: str, exit_code: int = EXIT_USER_ERROR) -> None:
        super().__init__(message)
        self.exit_code = exit_code

    def show(self, file: object = None) -> None:
        """Display the message on the Rich console.

        Args:
            file: Ignored, kept for Click compatibility.
        """
        error(escape(self.format_message()), soft_wrap=True)


def exit_code_for(status: ExecutionStatus) -> int:
    """Map an execution status to the process exit code."""
    return _STATUS_EXIT_CODES[status]


def format_pydantic_error(err: PydanticValidationError) -> str:
    """Format a pydantic ValidationError as one line per failing field.

    Example:
        >>> format_pydantic_error(err)
        "Validation failed:\\n  - confType: Input should be 'java', 'junit', ..."
    """
    errors: list[ErrorDetails] = err.errors()
    lines = ["Validation failed:"]
    for e in errors:
        loc = ".".join(str(x) for x in e["loc"])
        lines.append(f"  - {loc}: {e['msg']}")
    return "\n".join(lines)


def handle_yaml_error(err: Exception, file_path: str) -> NoReturn:
    """Raise a CLIError for a YAML syntax error, with its line and column.

    Raises:
        CLIError: Always.
    """
    error_msg = str(err)
    mark = getattr(err, "problem_mark", None)
    if mark is not None:
        problem = getattr(err, "problem", None)
        error_msg = f"YAML syntax error at line {mark.line + 1}, column {mark.column + 1}: {problem}"
    raise CLIError(f"Invalid YAML in {file_path}: {error_msg}")


def handle_validation_error(err: PydanticValidationError, file_path: str) -> NoReturn:
    """Raise a CLIError listing every invalid field of ``file_path``.

    Raises:
        CLIError: Always.
    """
    raise CLIError(f"Invalid project in {file_path}:\n{format_pydantic_error(err)}")


def handle_file_not_found(file_path: str) -> NoReturn:
    """Raise a CLIError for a missing input file.

    Raises:
        CLIError: Always, with EXIT_SYSTEM_ERROR.
    """
    raise CLIError(
        f"File not found: {file_path}\n\nUse --project to specify the project file.",
        exit_code=EXIT_SYSTEM_ERROR,
    )
