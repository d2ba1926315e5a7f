"""Shared test fixtures for kompile-cli tests.

Provides CliRunner fixtures and paths to the project and configuration
fixtures. Configurations wire the in-memory backends from testing.fixtures.
"""

from __future__ import annotations

import logging
from collections.abc import Generator, Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
import structlog
from click.testing import CliRunner

from kompile_core.config import CONFIG_ENV_VAR
from kompile_core.version import reset_version_info


@pytest.fixture(autouse=True)
def quiet_logging() -> Iterator[None]:
    """Keep log events out of command output.

    build_executor would install a process-wide stdlib logging setup, so it
    is replaced for the duration of the test.
    """
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(logging.CRITICAL))
    with patch("kompile_core.config.configure_logging"):
        yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def isolated_version(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Reset the process-wide version and ignore any ambient KOMPILE_CONFIG."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    reset_version_info()
    yield
    reset_version_info()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def isolated_runner(cli_runner: CliRunner) -> Generator[CliRunner, None, None]:
    """Create a Click test runner inside a temporary working directory."""
    with cli_runner.isolated_filesystem():
        yield cli_runner


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def kompile_yaml(fixtures_dir: Path) -> Path:
    """Configuration wiring the recording backends."""
    return fixtures_dir / "kompile.yaml"


@pytest.fixture
def erroring_kompile_yaml(fixtures_dir: Path) -> Path:
    """Configuration whose JVM backend reports an ERROR on File.kt."""
    return fixtures_dir / "kompile_erroring.yaml"


@pytest.fixture
def hello_project(fixtures_dir: Path) -> Path:
    """A java project with a single File.kt."""
    return fixtures_dir / "hello.yaml"
