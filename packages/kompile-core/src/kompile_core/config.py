"""Configuration and executor wiring for kompile.

This module handles loading kompile.yaml and building a ProjectExecutor
from it:
- KompileConfig: Validated configuration model
- load_config: Locate kompile.yaml (KOMPILE_CONFIG env var or search paths)
- load_reference: Import a "module:attribute" backend reference
- build_executor: Wire backends, environment, telemetry and version

Example kompile.yaml:

    version:
      version: "2.1.0"
      stdlibVersion: "2.1.0"
    backends:
      jvm: acme.backends:JvmCompiler
      js: acme.backends:JsTranslator
      wasm: acme.backends:WasmTranslator
      completion: acme.backends:CompletionEngine
    telemetry: log
    logging:
      level: INFO
      jsonFormat: false
"""

from __future__ import annotations

import importlib
import os
from enum import Enum
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from kompile_core.errors import BackendLoadError, ConfigurationError
from kompile_core.executor import ProjectExecutor
from kompile_core.observability import configure_logging
from kompile_core.schemas import VersionInfo
from kompile_core.telemetry import (
    LoggingTelemetrySink,
    NoopTelemetrySink,
    SpanTelemetrySink,
    TelemetrySink,
)
from kompile_core.version import set_version_info

logger = structlog.get_logger(__name__)

# Environment variable pointing at an explicit kompile.yaml
CONFIG_ENV_VAR = "KOMPILE_CONFIG"

# Standard config file name
CONFIG_FILE_NAME = "kompile.yaml"

# Standard locations to search for kompile.yaml, relative to the working directory
CONFIG_SEARCH_PATHS = (
    Path("."),
    Path(".kompile"),
)

# Reference format: "package.module:attribute"
REFERENCE_PATTERN = r"^[A-Za-z_][\w.]*:[A-Za-z_][\w.]*$"

_MODEL_CONFIG = ConfigDict(
    frozen=True,
    extra="forbid",
    alias_generator=to_camel,
    populate_by_name=True,
)


class TelemetryMode(str, Enum):
    """Telemetry sink selection."""

    NONE = "none"
    LOG = "log"
    SPAN = "span"


class BackendsConfig(BaseModel):
    """Backend references.

    Each reference names a class or zero-argument factory as
    "module:attribute". Calling it must return the backend instance.

    Attributes:
        jvm: JvmBackend factory.
        js: JsIrBackend factory.
        wasm: WasmBackend factory.
        completion: CompletionEngine factory.
        environment: Optional EnvironmentProvider factory. Defaults to
            LocalEnvironmentProvider.
    """

    model_config = _MODEL_CONFIG

    jvm: str = Field(..., pattern=REFERENCE_PATTERN, description="JVM backend reference")
    js: str = Field(..., pattern=REFERENCE_PATTERN, description="JS IR backend reference")
    wasm: str = Field(..., pattern=REFERENCE_PATTERN, description="WASM backend reference")
    completion: str = Field(..., pattern=REFERENCE_PATTERN, description="Completion reference")
    environment: str | None = Field(
        default=None, pattern=REFERENCE_PATTERN, description="Environment provider reference"
    )


class LoggingConfig(BaseModel):
    """Logging settings.

    Attributes:
        level: Minimum log level.
        json_format: Render JSON instead of console output.
    """

    model_config = _MODEL_CONFIG

    level: str = Field(default="INFO", description="Log level")
    json_format: bool = Field(default=False, description="JSON log output")

    @field_validator("level")
    @classmethod
    def validate_level(cls, value: str) -> str:
        """Normalize and check the log level name."""
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return level


class KompileConfig(BaseModel):
    """Root configuration model for kompile.yaml.

    Attributes:
        version: Backend version descriptor.
        backends: Backend references.
        telemetry: Telemetry sink to install.
        logging: Logging settings.
    """

    model_config = _MODEL_CONFIG

    version: VersionInfo
    backends: BackendsConfig
    telemetry: TelemetryMode = Field(default=TelemetryMode.NONE, description="Telemetry sink")
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> KompileConfig:
        """Load and validate a KompileConfig from a YAML file.

        Args:
            path: Path to kompile.yaml.

        Returns:
            Validated KompileConfig.

        Raises:
            ConfigurationError: If the file is missing, not valid YAML, or
                fails validation.
        """
        path = Path(path)
        if not path.exists():
            raise ConfigurationError("Configuration file not found", file_path=str(path))

        try:
            with path.open("r", encoding="utf-8") as f:
                data: dict[str, Any] = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                "Invalid YAML", file_path=str(path), internal_details=str(e)
            ) from e

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            first = e.errors()[0]
            raise ConfigurationError(
                f"Invalid configuration: {first['msg']}",
                file_path=str(path),
                field_path=".".join(str(x) for x in first["loc"]),
                internal_details=str(e),
            ) from e


def find_config_file(search_paths: tuple[Path, ...] | None = None) -> Path | None:
    """Locate kompile.yaml.

    Honors ``KOMPILE_CONFIG`` first, then searches ``search_paths``.

    Returns:
        Path to the configuration file, or None if none was found.
    """
    explicit = os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        return Path(explicit)

    for base_path in search_paths or CONFIG_SEARCH_PATHS:
        candidate = base_path / CONFIG_FILE_NAME
        if candidate.exists():
            logger.debug("config_found", path=str(candidate))
            return candidate
    return None


def load_config(path: str | Path | None = None) -> KompileConfig:
    """Load configuration from ``path`` or the standard locations.

    Raises:
        ConfigurationError: If no configuration file can be found or loaded.
    """
    config_path = Path(path) if path is not None else find_config_file()
    if config_path is None:
        raise ConfigurationError(
            f"No {CONFIG_FILE_NAME} found. Set {CONFIG_ENV_VAR} or pass --config."
        )
    return KompileConfig.from_yaml(config_path)


def load_reference(reference: str, *, field_path: str | None = None) -> Any:
    """Import the object named by a "module:attribute" reference.

    Raises:
        BackendLoadError: If the module or attribute cannot be found.
    """
    module_name, _, attr_path = reference.partition(":")
    try:
        obj: Any = importlib.import_module(module_name)
        for attr in attr_path.split("."):
            obj = getattr(obj, attr)
    except (ImportError, AttributeError) as e:
        raise BackendLoadError(reference, field_path=field_path, internal_details=str(e)) from e
    return obj


def _instantiate(reference: str, field_path: str) -> Any:
    factory = load_reference(reference, field_path=field_path)
    if not callable(factory):
        raise BackendLoadError(
            reference, field_path=field_path, internal_details="reference is not callable"
        )
    return factory()


def create_telemetry_sink(mode: TelemetryMode) -> TelemetrySink:
    """Build the telemetry sink for ``mode``."""
    sinks: dict[TelemetryMode, type[TelemetrySink]] = {
        TelemetryMode.NONE: NoopTelemetrySink,
        TelemetryMode.LOG: LoggingTelemetrySink,
        TelemetryMode.SPAN: SpanTelemetrySink,
    }
    return sinks[mode]()


def build_executor(config: KompileConfig, *, configure_logs: bool = True) -> ProjectExecutor:
    """Wire a ProjectExecutor from configuration.

    Sets the process-wide VersionInfo, optionally configures logging,
    instantiates every backend and the telemetry sink.

    Args:
        config: Loaded configuration.
        configure_logs: Apply ``config.logging`` to structlog.

    Returns:
        Ready-to-use ProjectExecutor.

    Raises:
        BackendLoadError: If a backend reference cannot be loaded.
        VersionAlreadySetError: If a different version was set earlier.
    """
    if configure_logs:
        configure_logging(
            log_level=config.logging.level,
            json_format=config.logging.json_format,
        )

    version = set_version_info(config.version)
    backends = config.backends

    environment_provider = (
        _instantiate(backends.environment, "backends.environment")
        if backends.environment
        else None
    )

    executor = ProjectExecutor(
        jvm_backend=_instantiate(backends.jvm, "backends.jvm"),
        js_backend=_instantiate(backends.js, "backends.js"),
        wasm_backend=_instantiate(backends.wasm, "backends.wasm"),
        completion_engine=_instantiate(backends.completion, "backends.completion"),
        version=version,
        environment_provider=environment_provider,
        telemetry=create_telemetry_sink(config.telemetry),
    )
    logger.info(
        "executor_built",
        version=version.version,
        telemetry=config.telemetry.value,
    )
    return executor
