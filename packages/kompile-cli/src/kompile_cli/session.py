"""Shared command plumbing: common options, project loading, executor wiring."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import click
import yaml
from pydantic import ValidationError as PydanticValidationError
from rich.markup import escape

from kompile_cli.errors import (
    EXIT_USER_ERROR,
    CLIError,
    handle_file_not_found,
    handle_validation_error,
    handle_yaml_error,
)
from kompile_cli.output import error, info, warning
from kompile_core.config import build_executor, load_config
from kompile_core.diagnostics import format_diagnostic
from kompile_core.errors import KompileError
from kompile_core.executor import ProjectExecutor
from kompile_core.schemas import CompilerDiagnostics, Project, ProjectSeverity

F = TypeVar("F", bound=Callable[..., Any])

DEFAULT_PROJECT_FILE = "./project.yaml"


def project_option(func: F) -> F:
    """Add ``-p/--project``."""
    return click.option(
        "-p",
        "--project",
        "project_path",
        type=click.Path(exists=False),
        default=DEFAULT_PROJECT_FILE,
        help=f"Project file, YAML or JSON [default: {DEFAULT_PROJECT_FILE}]",
    )(func)


def config_option(func: F) -> F:
    """Add ``-c/--config``."""
    return click.option(
        "-c",
        "--config",
        "config_path",
        type=click.Path(exists=False),
        default=None,
        help="kompile.yaml [default: $KOMPILE_CONFIG, ./kompile.yaml, ./.kompile/kompile.yaml]",
    )(func)


def json_option(func: F) -> F:
    """Add ``--json``."""
    return click.option(
        "--json",
        "as_json",
        is_flag=True,
        default=False,
        help="Print the full result as JSON.",
    )(func)


def load_project(project_path: str) -> Project:
    """Load a project file, converting failures to CLIError.

    Raises:
        CLIError: If the file is missing, malformed or invalid.
    """
    if not Path(project_path).exists():
        handle_file_not_found(project_path)

    try:
        return Project.from_file(project_path)
    except yaml.YAMLError as e:
        handle_yaml_error(e, project_path)
    except json.JSONDecodeError as e:
        raise CLIError(f"Invalid JSON in {project_path}: {e}") from None
    except PydanticValidationError as e:
        handle_validation_error(e, project_path)


def load_executor(config_path: str | None) -> ProjectExecutor:
    """Load kompile.yaml and wire an executor.

    Raises:
        CLIError: If the configuration cannot be found, validated or loaded.
    """
    try:
        return build_executor(load_config(config_path))
    except KompileError as e:
        raise CLIError(e.user_message, exit_code=EXIT_USER_ERROR) from None


def guard(call: Callable[[], Any]) -> Any:
    """Invoke an executor operation, converting kompile errors to CLIError."""
    try:
        return call()
    except KompileError as e:
        raise CLIError(e.user_message) from None


def show_diagnostics(diagnostics: CompilerDiagnostics) -> None:
    """Print every diagnostic as a report line, styled by severity."""
    for file_name, descriptors in diagnostics.map.items():
        for descriptor in descriptors:
            line = escape(format_diagnostic(file_name, descriptor))
            if descriptor.severity == ProjectSeverity.ERROR:
                error(line)
            elif descriptor.severity == ProjectSeverity.WARNING:
                warning(line)
            else:
                info(line)
