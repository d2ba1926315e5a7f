"""Project model for kompile.

This module defines the input side of every executor operation:
- ProjectType: Closed enumeration of compilation targets
- ProjectFile: A single named source file
- Project: Ordered, name-unique set of files plus target configuration

A Project is immutable and owned by the caller. It is passed by reference
into every executor operation and never mutated by it.
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ProjectType(str, Enum):
    """Target platform selector.

    The set is closed: every member must be routed by the executor.

    Attributes:
        JAVA: Run on the JVM.
        JUNIT: Run JUnit tests on the JVM.
        CANVAS: JavaScript with a canvas host page.
        JS: JavaScript (legacy name, translated with the IR backend).
        JS_IR: JavaScript through the IR backend.
        WASM: Plain WebAssembly.
        COMPOSE_WASM: WebAssembly for the Compose UI framework.
    """

    JAVA = "java"
    JUNIT = "junit"
    CANVAS = "canvas"
    JS = "js"
    JS_IR = "js-ir"
    WASM = "wasm"
    COMPOSE_WASM = "compose-wasm"

    @property
    def is_jvm(self) -> bool:
        """Check if this target compiles to JVM bytecode."""
        return self in (ProjectType.JAVA, ProjectType.JUNIT)

    @property
    def is_js(self) -> bool:
        """Check if this target translates to JavaScript."""
        return self in (ProjectType.CANVAS, ProjectType.JS, ProjectType.JS_IR)

    @property
    def is_wasm(self) -> bool:
        """Check if this target translates to WebAssembly."""
        return self in (ProjectType.WASM, ProjectType.COMPOSE_WASM)


class ProjectFile(BaseModel):
    """A named source file.

    Attributes:
        name: File name, unique within a project (e.g., "File.kt").
        text: Raw source text.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1, description="File name")
    text: str = Field(default="", description="Source text")


class Project(BaseModel):
    """A compilable project.

    Attributes:
        args: Free-form argument string passed to the program or translator.
        files: Ordered source files. Names must be unique.
        conf_type: Target platform (JSON key: "confType").
        add_classpath: Include the runtime classpath in JVM compilation
            (JSON key: "addClasspath").

    Example:
        >>> project = Project(
        ...     files=[ProjectFile(name="File.kt", text="fun main() {}")],
        ...     conf_type=ProjectType.JAVA,
        ... )
        >>> project.file_names
        ['File.kt']
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    args: str = Field(default="", description="Program or translator arguments")
    files: list[ProjectFile] = Field(default_factory=list, description="Source files")
    conf_type: ProjectType = Field(default=ProjectType.JAVA, description="Target platform")
    add_classpath: bool = Field(default=False, description="Include runtime classpath")

    @field_validator("files")
    @classmethod
    def validate_unique_names(cls, files: list[ProjectFile]) -> list[ProjectFile]:
        """Reject projects that declare the same file name twice."""
        seen: set[str] = set()
        for file in files:
            if file.name in seen:
                raise ValueError(f"Duplicate file name: {file.name}")
            seen.add(file.name)
        return files

    @property
    def file_names(self) -> list[str]:
        """Names of all files in declaration order."""
        return [f.name for f in self.files]

    @property
    def arguments(self) -> list[str]:
        """The argument string split on whitespace."""
        return self.args.split()

    @classmethod
    def from_yaml(cls, path: str | Path) -> Project:
        """Load and validate a Project from a YAML file.

        Args:
            path: Path to the project description.

        Returns:
            Validated Project instance.

        Raises:
            FileNotFoundError: If file doesn't exist.
            yaml.YAMLError: If YAML syntax is invalid.
            pydantic.ValidationError: If schema validation fails.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        with path.open("r", encoding="utf-8") as f:
            data: dict[str, Any] = yaml.safe_load(f) or {}

        return cls.model_validate(data)

    @classmethod
    def from_file(cls, path: str | Path) -> Project:
        """Load a Project from a YAML or JSON file, chosen by suffix."""
        path = Path(path)
        if path.suffix == ".json":
            if not path.exists():
                raise FileNotFoundError(f"File not found: {path}")
            return cls.model_validate(json.loads(path.read_text(encoding="utf-8")))
        return cls.from_yaml(path)

    def __str__(self) -> str:
        return (
            f"Project(conf_type={self.conf_type.value}, files={self.file_names}, "
            f"args={self.args!r})"
        )
